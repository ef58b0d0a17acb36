"""
URL Normalization Service

Builds the deduplication key for article URLs so the same story reached
through different sources, protocols or tracking links is kept only once.
"""

import logging
from typing import Iterable, TypeVar
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Query parameters to always remove (tracking)
REMOVE_PARAMS = {
    'utm_source', 'utm_medium', 'utm_campaign', 'utm_term', 'utm_content',
    'fbclid', 'gclid', 'mc_cid', 'mc_eid', '_ga', '_gl',
    'ncid', 'ocid', 'sr_share', 'cmpid', 'at_medium', 'at_campaign',
}


def normalize_url(url: str) -> str:
    """
    Normalize a URL into a deduplication key.

    Normalization rules:
    1. Lowercase the host and standardize to https://
    2. Remove www. prefix
    3. Remove trailing slashes from path (path case is kept)
    4. Remove tracking query parameters, keep the rest in original order
    5. Remove fragments (#...)

    Args:
        url: Absolute article URL

    Returns:
        Normalized URL string ('' for empty input)
    """
    if not url:
        return ''

    try:
        parsed = urlparse(url.strip())

        netloc = parsed.netloc.lower()
        if netloc.startswith('www.'):
            netloc = netloc[4:]

        path = parsed.path.rstrip('/')

        params = [
            (key, value)
            for key, value in parse_qsl(parsed.query, keep_blank_values=False)
            if key.lower() not in REMOVE_PARAMS
        ]
        query = urlencode(params) if params else ''

        return urlunparse(('https', netloc, path, '', query, ''))

    except ValueError as e:
        logger.warning(f"URL normalization failed for '{url}': {e}")
        return url.strip()


def deduplicate_articles(articles: Iterable[T]) -> tuple[list[T], int]:
    """
    Deduplicate records by normalized URL, keeping the first occurrence.

    Args:
        articles: Records exposing a 'url' attribute, in merge order

    Returns:
        Tuple of (deduplicated records in original order, duplicate count)
    """
    seen_urls = set()
    unique_articles = []
    duplicates = 0

    for article in articles:
        key = normalize_url(article.url)
        if not key:
            continue

        if key in seen_urls:
            duplicates += 1
            logger.debug(f"Duplicate URL skipped: {article.url}")
        else:
            seen_urls.add(key)
            unique_articles.append(article)

    logger.info(f"Deduplication: {len(unique_articles) + duplicates} -> {len(unique_articles)} ({duplicates} duplicates removed)")
    return unique_articles, duplicates
