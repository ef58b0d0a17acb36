"""
News Search Services

This package contains the services behind a keyword search:
- date_normalizer: Turn free-form source dates into calendar dates
- text_matcher: Clean request keywords and match them against article text
- url_normalizer: Normalize URLs for deduplication
- summary_extractor: Pull a short excerpt from an article page
- source_adapter: Fetch and extract candidates from one feed or listing page
- sources: Static source catalogue
- aggregator: Run every source concurrently and build the ranked result
- webhook_proxy: Relay payloads to outbound webhooks
"""

from livestock_news.services.date_normalizer import normalize_date, normalize_date_with_confidence
from livestock_news.services.text_matcher import clean_keywords, matched_keywords
from livestock_news.services.url_normalizer import normalize_url, deduplicate_articles
from livestock_news.services.summary_extractor import extract_summary
from livestock_news.services.source_adapter import SourceAdapter
from livestock_news.services.sources import get_sources
from livestock_news.services.aggregator import aggregate, run_search, build_adapters

__all__ = [
    'normalize_date',
    'normalize_date_with_confidence',
    'clean_keywords',
    'matched_keywords',
    'normalize_url',
    'deduplicate_articles',
    'extract_summary',
    'SourceAdapter',
    'get_sources',
    'aggregate',
    'run_search',
    'build_adapters',
]
