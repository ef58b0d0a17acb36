"""
Aggregation Pipeline - Search Orchestration

Runs one keyword search across every configured source:

1. Fetch all sources concurrently (one thread per source, own deadline each)
2. Normalize candidates into Articles (id, date, summary, matched keywords)
3. Drop articles without keyword matches (unless the source is keyword-exempt)
4. Deduplicate by normalized URL (first occurrence wins)
5. Keep only articles from the recency window
6. Sort newest first (stable)

Every request builds its own adapters and HTTP clients; nothing is cached.
"""

import json
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

import httpx

from livestock_news.models import Article, RawCandidate, SearchResult
from livestock_news.services.date_normalizer import normalize_date_with_confidence, utc_today
from livestock_news.services.source_adapter import SourceAdapter
from livestock_news.services.sources import get_sources
from livestock_news.services.summary_extractor import MAX_SUMMARY_LENGTH, clean_text, truncate
from livestock_news.services.text_matcher import matched_keywords
from livestock_news.services.url_normalizer import deduplicate_articles

logger = logging.getLogger(__name__)

# Configuration
RECENCY_DAYS = int(os.environ.get('RECENCY_DAYS', 7))
SUMMARY_PLACEHOLDER = 'No summary available.'


def _log_progress(msg: str, start_time: float = None):
    """Log search progress with elapsed time."""
    elapsed = f"[{time.time() - start_time:.1f}s] " if start_time else ""
    logger.info(f"{elapsed}SEARCH: {msg}")


def build_adapters(sources=None, transport: Optional[httpx.BaseTransport] = None, **adapter_options) -> list[SourceAdapter]:
    """
    Create one SourceAdapter per source configuration.

    Args:
        sources: SourceConfig list (defaults to the catalogue)
        transport: Optional httpx transport passed to every adapter
        **adapter_options: Extra SourceAdapter keyword arguments
    """
    if sources is None:
        sources = get_sources()
    return [SourceAdapter(source, transport=transport, **adapter_options) for source in sources]


def run_search(
    keywords: list[str],
    adapters: Optional[list[SourceAdapter]] = None,
    today: Optional[date] = None,
) -> SearchResult:
    """
    Run the complete search pipeline.

    Args:
        keywords: Cleaned query keywords
        adapters: Source adapters in merge order (defaults to the catalogue)
        today: Reference date for date normalization and recency (defaults to UTC today)

    Returns:
        SearchResult with ordered articles and pipeline stats
    """
    search_start = time.time()
    if adapters is None:
        adapters = build_adapters()
    if today is None:
        today = utc_today()

    logger.info(json.dumps({
        "event": "search_start",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "keywords": keywords,
        "sources": [adapter.tag for adapter in adapters],
    }))

    # Step 1: Fetch all sources
    candidate_lists, stats = collect_candidates(adapters, keywords)
    stats['candidates'] = sum(len(candidates) for candidates in candidate_lists)
    _log_progress(f"Step 1: {stats['candidates']} candidates from {stats['sources_succeeded']}/{stats['sources_total']} sources", search_start)

    # Steps 2-3: Normalize and keyword filter, per source in adapter order
    matched = []
    stats['keyword_rejected'] = 0
    for adapter, candidates in zip(adapters, candidate_lists):
        articles = normalize_candidates(candidates, adapter, keywords, today)
        kept = filter_by_keywords(articles, always_include=adapter.config.always_include)
        stats['keyword_rejected'] += len(articles) - len(kept)
        matched.extend(kept)

    # Step 4: Deduplicate
    unique, duplicates = deduplicate_articles(matched)
    stats['duplicates_removed'] = duplicates

    # Step 5: Recency window
    recent = filter_recent(unique, today)
    stats['stale_removed'] = len(unique) - len(recent)

    # Step 6: Sort
    ordered = sort_articles(recent)

    stats['articles'] = len(ordered)
    stats['duration_seconds'] = round(time.time() - search_start, 2)
    _log_progress(f"Complete: {len(ordered)} articles", search_start)
    logger.info(json.dumps({"event": "search_complete", **stats}))

    return SearchResult(articles=ordered, stats=stats)


def aggregate(
    keywords: list[str],
    adapters: Optional[list[SourceAdapter]] = None,
    today: Optional[date] = None,
) -> list[Article]:
    """Run the pipeline and return only the ordered articles."""
    return run_search(keywords, adapters=adapters, today=today).articles


def collect_candidates(adapters: list[SourceAdapter], keywords: list[str]) -> tuple[list[list[RawCandidate]], dict]:
    """
    Fetch every source concurrently and gather results in adapter order.

    Each future is awaited only until its own adapter's deadline. Sources
    that time out or raise contribute an empty list; stragglers are left
    to finish in the background and their results are discarded.

    Returns:
        Tuple of (one candidate list per adapter, stats dict)
    """
    stats = {
        'sources_total': len(adapters),
        'sources_succeeded': 0,
        'sources_failed': 0,
        'sources_timed_out': 0,
    }
    if not adapters:
        return [], stats

    results = []
    executor = ThreadPoolExecutor(max_workers=len(adapters), thread_name_prefix='source')
    start = time.monotonic()
    try:
        futures = [executor.submit(adapter.fetch, keywords) for adapter in adapters]

        for adapter, future in zip(adapters, futures):
            remaining = adapter.budget - (time.monotonic() - start)
            try:
                candidates = future.result(timeout=max(0.0, remaining))
                stats['sources_succeeded'] += 1
            except FutureTimeoutError:
                logger.warning(f"Source '{adapter.config.name}' timed out after {adapter.budget:.0f}s")
                stats['sources_timed_out'] += 1
                candidates = []
            except Exception as e:
                logger.warning(f"Source '{adapter.config.name}' failed: {e}")
                stats['sources_failed'] += 1
                candidates = []
            results.append(candidates)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return results, stats


def normalize_candidates(
    candidates: Iterable[RawCandidate],
    adapter: SourceAdapter,
    keywords: list[str],
    today: date,
) -> list[Article]:
    """
    Convert one source's candidates into Articles.

    Ids are '{tag}-{ordinal}' in the source's emission order.
    """
    articles = []
    for ordinal, candidate in enumerate(candidates):
        summary = truncate(clean_text(candidate.raw_summary or ''), MAX_SUMMARY_LENGTH)
        article_date, confidence = normalize_date_with_confidence(candidate.raw_date, today)

        articles.append(Article(
            id=f"{adapter.tag}-{ordinal}",
            title=candidate.title,
            url=candidate.url,
            source=adapter.config.name,
            date=article_date,
            date_confidence=confidence,
            summary=summary or SUMMARY_PLACEHOLDER,
            matched_keywords=matched_keywords(f"{candidate.title} {summary}", keywords),
        ))
    return articles


def filter_by_keywords(articles: Iterable[Article], always_include: bool = False) -> list[Article]:
    """Keep articles with at least one matched keyword; keyword-exempt sources keep everything."""
    if always_include:
        return list(articles)
    return [a for a in articles if a.matched_keywords]


def filter_recent(articles: Iterable[Article], today: date, days: int = RECENCY_DAYS) -> list[Article]:
    """Keep articles dated on or after today - days."""
    cutoff = today - timedelta(days=days)
    return [a for a in articles if a.date >= cutoff]


def sort_articles(articles: Iterable[Article]) -> list[Article]:
    """Newest date first; equal dates keep their incoming order."""
    return sorted(articles, key=lambda a: a.date, reverse=True)
