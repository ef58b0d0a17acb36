"""
Summary Extractor Service

Fetches a linked article page and pulls a short excerpt from its body.
Used for sources whose listing pages only carry a headline and a link.
"""

import logging
import os
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from livestock_news.services.http_client import HTML_ACCEPT, create_client

logger = logging.getLogger(__name__)

# Request timeout (seconds)
SUMMARY_TIMEOUT = float(os.environ.get('SUMMARY_TIMEOUT', 5))

# Maximum summary length (characters)
MAX_SUMMARY_LENGTH = 400

# Paragraph heuristics
MIN_PARAGRAPH_LENGTH = 50
MAX_PARAGRAPHS = 3
MIN_SUMMARY_LENGTH = 100

# Article body paragraph selectors (tried in order)
CONTENT_SELECTORS = [
    'article p',
    '.article-content p',
    '.entry-content p',
    '.post-content p',
    '.content p',
    'main p',
]

# Elements that never hold article text
NON_CONTENT_TAGS = ['script', 'style', 'nav', 'header', 'footer', 'aside', 'form', 'iframe', 'noscript']


def extract_summary(url: str, client: Optional[httpx.Client] = None, timeout: float = SUMMARY_TIMEOUT) -> Optional[str]:
    """
    Fetch an article page and extract a representative excerpt.

    Args:
        url: Article URL
        client: Optional httpx client to reuse (the caller owns it)
        timeout: Request timeout in seconds

    Returns:
        Excerpt of at most MAX_SUMMARY_LENGTH characters, or None on any failure
    """
    owns_client = client is None
    if owns_client:
        client = create_client(timeout)

    try:
        response = client.get(url, timeout=timeout, headers={'Accept': HTML_ACCEPT})
        response.raise_for_status()
        summary = summary_from_html(response.text)
        if summary:
            logger.debug(f"Extracted {len(summary)} char summary from {url}")
        return summary

    except httpx.HTTPStatusError as e:
        logger.warning(f"HTTP error fetching summary from {url}: {e.response.status_code}")
    except httpx.RequestError as e:
        logger.warning(f"Request error fetching summary from {url}: {e}")
    except Exception as e:
        logger.error(f"Error extracting summary from {url}: {e}")
    finally:
        if owns_client:
            client.close()

    return None


def summary_from_html(html: str) -> Optional[str]:
    """
    Pick the first content selector whose long paragraphs form a usable excerpt.
    """
    soup = BeautifulSoup(html, 'html.parser')

    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    for selector in CONTENT_SELECTORS:
        paragraphs = [clean_text(p.get_text(' ', strip=True)) for p in soup.select(selector)]
        paragraphs = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_LENGTH][:MAX_PARAGRAPHS]
        combined = ' '.join(paragraphs)
        if len(combined) > MIN_SUMMARY_LENGTH:
            return truncate(combined, MAX_SUMMARY_LENGTH)

    return None


def clean_text(text: str) -> str:
    """
    Normalize whitespace in already-decoded text.
    """
    if not text:
        return ''
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def truncate(text: str, max_length: int = MAX_SUMMARY_LENGTH) -> str:
    """
    Truncate text to max_length characters (ellipsis included) at a word boundary.
    """
    if len(text) <= max_length:
        return text

    limit = max_length - 3
    truncated = text[:limit]
    last_space = truncated.rfind(' ')

    if last_space > limit * 0.8:  # Only use if we don't lose too much
        truncated = truncated[:last_space]

    return truncated.rstrip() + '...'


def extract_from_html(html: str) -> str:
    """
    Extract plain text from an HTML fragment (feed descriptions, teasers).
    """
    if not html:
        return ''
    if '<' not in html and '&' not in html:
        return clean_text(html)

    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()

    return clean_text(soup.get_text(separator=' ', strip=True))
