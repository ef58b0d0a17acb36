"""
Source Adapter Service

Turns one news source into a list of RawCandidate records.

Each source is described by a SourceConfig and fetched through an ordered
list of extraction strategies:
- feed: RSS/Atom via feedparser (preferred, structurally reliable)
- listing: HTML listing page scraped with BeautifulSoup using a list of
  fallback container selectors

The first strategy that yields candidates wins. Network and parse failures
are logged as warnings and degrade to an empty list; fetch() never raises.
"""

import logging
import os
import time
from typing import Callable, Iterable, Optional
from urllib.parse import urljoin, urlparse

import feedparser
import httpx
from bs4 import BeautifulSoup

from livestock_news.models import RawCandidate, SourceConfig
from livestock_news.services.http_client import FEED_ACCEPT, HTML_ACCEPT, create_client
from livestock_news.services.summary_extractor import (
    SUMMARY_TIMEOUT,
    MAX_SUMMARY_LENGTH,
    clean_text,
    extract_from_html,
    extract_summary,
    truncate,
)
from livestock_news.services.text_matcher import matched_keywords

logger = logging.getLogger(__name__)

# Candidate cleaning
MIN_TITLE_LENGTH = 12
MIN_PARAGRAPH_LENGTH = 40
REJECTED_LINK_PREFIXES = ('#', 'javascript:', 'mailto:', 'tel:')

# Summary enrichment (per source, per request)
SUMMARY_ENRICHMENT_ENABLED = os.environ.get('SUMMARY_ENRICHMENT_ENABLED', 'true').lower() == 'true'
SUMMARY_BUDGET = float(os.environ.get('SUMMARY_BUDGET', 8))
MAX_SUMMARY_FETCHES = 10

# Slack on top of the network timeouts before the pipeline gives up on a source
DEADLINE_GRACE = 1.0

# Elements stripped from listing pages before container matching
LISTING_NOISE_TAGS = ['script', 'style', 'noscript', 'nav', 'footer', 'form', 'iframe']

Strategy = Callable[[httpx.Client], Optional[list[RawCandidate]]]


class SourceAdapter:
    """
    Fetches and extracts raw candidates for one configured source.

    Args:
        config: Source configuration
        transport: Optional httpx transport (tests use httpx.MockTransport)
        enrich_summaries: Fetch article pages for candidates lacking a summary
        summary_budget: Seconds this source may spend on summary enrichment
    """

    def __init__(
        self,
        config: SourceConfig,
        transport: Optional[httpx.BaseTransport] = None,
        enrich_summaries: bool = SUMMARY_ENRICHMENT_ENABLED,
        summary_budget: float = SUMMARY_BUDGET,
    ):
        self.config = config
        self.transport = transport
        self.enrich_summaries = enrich_summaries and config.fetch_summaries
        self.summary_budget = summary_budget

    @property
    def tag(self) -> str:
        return self.config.tag

    @property
    def budget(self) -> float:
        """Seconds the pipeline should wait for this source before giving up."""
        budget = self.config.timeout * max(1, len(self.strategies())) + DEADLINE_GRACE
        if self.enrich_summaries:
            budget += self.summary_budget
        return budget

    def strategies(self) -> list[tuple[str, Strategy]]:
        """Ordered extraction strategies; feeds come before listing pages."""
        strategies = []
        if self.config.feed_url:
            strategies.append(('feed', self.fetch_feed))
        if self.config.listing_url:
            strategies.append(('listing', self.fetch_listing))
        return strategies

    def fetch(self, keywords: Optional[Iterable[str]] = None) -> list[RawCandidate]:
        """
        Fetch candidates from this source.

        Args:
            keywords: Query keywords, only used to prioritize summary enrichment

        Returns:
            List of RawCandidate (empty on failure)
        """
        start = time.time()
        client = create_client(self.config.timeout, transport=self.transport)
        try:
            candidates = first_success(self.strategies(), client, self.config.name)
            if candidates and self.enrich_summaries:
                self._enrich_summaries(candidates, list(keywords or []), client)
        except Exception as e:
            logger.warning(f"Source '{self.config.name}' failed: {e}")
            candidates = []
        finally:
            client.close()

        logger.info(f"Source '{self.config.name}': {len(candidates)} candidates in {time.time() - start:.1f}s")
        return candidates

    def fetch_feed(self, client: httpx.Client) -> Optional[list[RawCandidate]]:
        """Feed strategy: download the feed and parse its items."""
        url = self.config.feed_url
        try:
            response = client.get(url, headers={'Accept': FEED_ACCEPT})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Feed fetch failed for {url}: HTTP {e.response.status_code}")
            return None
        except httpx.RequestError as e:
            logger.warning(f"Feed request error for {url}: {e}")
            return None

        return parse_feed(response.content, self.config)

    def fetch_listing(self, client: httpx.Client) -> Optional[list[RawCandidate]]:
        """Listing strategy: download the listing page and scrape containers."""
        url = self.config.listing_url
        try:
            response = client.get(url, headers={'Accept': HTML_ACCEPT})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Listing fetch failed for {url}: HTTP {e.response.status_code}")
            return None
        except httpx.RequestError as e:
            logger.warning(f"Listing request error for {url}: {e}")
            return None

        return parse_listing(response.text, self.config)

    def _enrich_summaries(self, candidates: list[RawCandidate], keywords: list[str], client: httpx.Client):
        """
        Fill missing summaries from the article pages within the summary budget.

        Candidates whose title already matches a keyword go first.
        """
        missing = [c for c in candidates if not c.raw_summary]
        if not missing:
            return

        missing.sort(key=lambda c: not matched_keywords(c.title, keywords))
        deadline = time.monotonic() + self.summary_budget
        fetched = 0

        for candidate in missing:
            remaining = deadline - time.monotonic()
            if fetched >= MAX_SUMMARY_FETCHES or remaining <= 0:
                logger.info(f"Source '{self.config.name}': summary budget spent, {len(missing) - fetched} left without summary")
                break
            candidate.raw_summary = extract_summary(
                candidate.url,
                client=client,
                timeout=min(SUMMARY_TIMEOUT, remaining),
            )
            fetched += 1


def first_success(strategies: list[tuple[str, Strategy]], client: httpx.Client, source_name: str = '') -> list[RawCandidate]:
    """
    Run strategies in order and return the first non-empty result.

    A strategy signals failure by returning None or an empty list, or by
    raising; either way the next strategy is tried.
    """
    for name, strategy in strategies:
        try:
            candidates = strategy(client)
        except Exception as e:
            logger.warning(f"Source '{source_name}': {name} strategy raised {e}")
            continue
        if candidates:
            logger.debug(f"Source '{source_name}': {name} strategy yielded {len(candidates)} candidates")
            return candidates
        logger.info(f"Source '{source_name}': {name} strategy found nothing, falling through")
    return []


# ============================================================================
# Feed parsing
# ============================================================================

def parse_feed(content, config: SourceConfig) -> list[RawCandidate]:
    """
    Parse RSS/Atom content into candidates.

    Args:
        content: Feed document (bytes or str)
        config: Source configuration (base URL, cap, tag)

    Returns:
        Candidates in feed order, capped at config.max_articles
    """
    result = feedparser.parse(content)

    if result.get('bozo'):
        # feedparser often recovers partial data
        logger.warning(f"Feed parsing issue for {config.name}: {result.get('bozo_exception')}")

    candidates = []
    seen_urls = set()
    for entry in result.get('entries', []):
        if len(candidates) >= config.max_articles:
            break
        candidate = _parse_feed_entry(entry, config)
        if candidate and candidate.url not in seen_urls:
            seen_urls.add(candidate.url)
            candidates.append(candidate)

    return candidates


def _parse_feed_entry(entry: dict, config: SourceConfig) -> Optional[RawCandidate]:
    """Map one feedparser entry to a candidate, or None if title/link are missing."""
    title = extract_from_html(entry.get('title', ''))
    link = (entry.get('link') or '').strip()
    url = resolve_url(link, config.base_url)

    if not title or not url:
        return None

    description = entry.get('summary') or entry.get('description') or ''
    if not description and entry.get('content'):
        description = entry['content'][0].get('value', '')
    summary = extract_from_html(description)

    raw_date = None
    parsed = entry.get('published_parsed') or entry.get('updated_parsed')
    if parsed:
        raw_date = time.strftime('%Y-%m-%dT%H:%M:%SZ', parsed)
    else:
        raw_date = entry.get('published') or entry.get('updated')

    return RawCandidate(
        title=title,
        url=url,
        source=config.tag,
        raw_summary=truncate(summary, MAX_SUMMARY_LENGTH) if summary else None,
        raw_date=raw_date,
    )


# ============================================================================
# Listing page scraping
# ============================================================================

def parse_listing(html: str, config: SourceConfig) -> list[RawCandidate]:
    """
    Scrape an HTML listing page into candidates.

    Tries config.container_selectors in order and uses the first one that
    matches at least one element.

    Returns:
        Candidates in page order, capped at config.max_articles
    """
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(LISTING_NOISE_TAGS):
        tag.decompose()

    selector, containers = select_first(soup, config.container_selectors)
    if not containers:
        logger.warning(f"No article containers matched for {config.name}")
        return []

    logger.debug(f"{config.name}: selector '{selector}' matched {len(containers)} containers")

    own_pages = {resolve_url(u, config.base_url) for u in (config.base_url, config.listing_url) if u}
    candidates = []
    seen_urls = set()

    for container in containers:
        if len(candidates) >= config.max_articles:
            break
        candidate = _parse_container(container, config)
        if not candidate or candidate.url in seen_urls or candidate.url in own_pages:
            continue
        seen_urls.add(candidate.url)
        candidates.append(candidate)

    return candidates


def select_first(root, selectors: Iterable[str]) -> tuple[Optional[str], list]:
    """Return (selector, matches) for the first selector with at least one match."""
    for selector in selectors:
        try:
            found = root.select(selector)
        except Exception as e:
            logger.warning(f"Invalid selector '{selector}': {e}")
            continue
        if found:
            return selector, found
    return None, []


def _parse_container(container, config: SourceConfig) -> Optional[RawCandidate]:
    """Extract title, URL, summary and date from one article container."""
    anchor = container if container.name == 'a' and container.get('href') else container.select_one('a[href]')
    if anchor is None:
        return None

    url = resolve_url(anchor.get('href', ''), config.base_url)
    title = _extract_title(container, anchor, config.title_selectors)

    if not url or len(title) < MIN_TITLE_LENGTH:
        return None

    summary = _extract_summary(container, title, config.summary_selectors)

    return RawCandidate(
        title=title,
        url=url,
        source=config.tag,
        raw_summary=summary,
        raw_date=_extract_date(container, config.date_selectors),
    )


def _extract_title(container, anchor, selectors: list[str]) -> str:
    """First heading-like element with usable text, else the anchor text."""
    for selector in selectors:
        element = container.select_one(selector)
        if element is None:
            continue
        title = clean_text(element.get_text(' ', strip=True))
        if len(title) >= MIN_TITLE_LENGTH:
            return title
    return clean_text(anchor.get_text(' ', strip=True))


def _extract_summary(container, title: str, selectors: list[str]) -> Optional[str]:
    """Join long paragraph texts from the first summary selector that has any."""
    for selector in selectors:
        paragraphs = []
        for element in container.select(selector):
            text = clean_text(element.get_text(' ', strip=True))
            if len(text) > MIN_PARAGRAPH_LENGTH and text != title and text not in paragraphs:
                paragraphs.append(text)
        if paragraphs:
            return truncate(' '.join(paragraphs), MAX_SUMMARY_LENGTH)
    return None


def _extract_date(container, selectors: list[str]) -> Optional[str]:
    """Machine-readable <time datetime> first, then visible date text."""
    time_tag = container.find('time')
    if time_tag is not None:
        value = time_tag.get('datetime') or time_tag.get_text(' ', strip=True)
        if value:
            return value.strip()

    for selector in selectors:
        element = container.select_one(selector)
        if element is not None:
            text = clean_text(element.get_text(' ', strip=True))
            if text:
                return text
    return None


def resolve_url(href: str, base_url: str) -> str:
    """
    Resolve a link against the source's base URL.

    Returns '' for empty, fragment-only or non-http(s) links.
    """
    href = (href or '').strip()
    if not href or href.lower().startswith(REJECTED_LINK_PREFIXES):
        return ''

    url = urljoin(base_url, href)
    if urlparse(url).scheme not in ('http', 'https'):
        return ''
    return url
