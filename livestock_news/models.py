"""
Data models for Livestock News Finder

All records are plain dataclasses built fresh for every search request.
Nothing here is persisted.
"""
import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


# ============================================================================
# Enum Definitions
# ============================================================================

class DateConfidence(enum.Enum):
    """How an article date was obtained"""
    EXACT = "exact"        # Parsed from the source's own date text
    INFERRED = "inferred"  # Source date missing or unreadable, today assumed


# ============================================================================
# Source Configuration
# ============================================================================

DEFAULT_TITLE_SELECTORS = [
    'h1', 'h2', 'h3', 'h4',
    '.title', '.headline', '.entry-title',
]

DEFAULT_SUMMARY_SELECTORS = [
    'p',
    '.excerpt',
    '.summary',
    '.standfirst',
]

DEFAULT_DATE_SELECTORS = [
    '.date',
    '.published',
    '.post-date',
    '.timestamp',
    '.meta-date',
]


@dataclass
class SourceConfig:
    """
    Static configuration for one news source.

    A source may expose a feed, a listing page, or both. When both are set
    the feed is tried first and the listing page is the fallback.
    """
    tag: str
    name: str
    base_url: str
    listing_url: Optional[str] = None
    feed_url: Optional[str] = None
    container_selectors: list[str] = field(default_factory=list)
    title_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_TITLE_SELECTORS))
    summary_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_SUMMARY_SELECTORS))
    date_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_DATE_SELECTORS))
    max_articles: int = 20
    always_include: bool = False  # Keyword-exempt (e.g. press release channels)
    fetch_summaries: bool = True
    timeout: float = 10.0


# ============================================================================
# Pipeline Records
# ============================================================================

@dataclass
class RawCandidate:
    """Unfiltered record extracted by a source adapter."""
    title: str
    url: str
    source: str  # SourceConfig.tag
    raw_summary: Optional[str] = None
    raw_date: Optional[str] = None


@dataclass
class Article:
    """Normalized, caller-visible article."""
    id: str
    title: str
    url: str
    source: str
    date: date
    summary: str
    matched_keywords: list[str] = field(default_factory=list)
    date_confidence: DateConfidence = DateConfidence.EXACT

    def to_dict(self) -> dict:
        """Serialize to the JSON shape returned by /api/search."""
        return {
            'id': self.id,
            'title': self.title,
            'url': self.url,
            'source': self.source,
            'date': self.date.isoformat(),
            'dateConfidence': self.date_confidence.value,
            'summary': self.summary,
            'matchedKeywords': list(self.matched_keywords),
        }


@dataclass
class SearchResult:
    """Articles from one search plus pipeline stats."""
    articles: list[Article]
    stats: dict = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.articles)

    def to_dict(self) -> dict:
        return {
            'success': True,
            'count': self.count,
            'articles': [article.to_dict() for article in self.articles],
        }
