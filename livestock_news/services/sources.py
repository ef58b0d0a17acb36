"""
Source catalogue

Static configuration for the livestock news sources searched on every
request. Each entry is a SourceConfig handled by the shared SourceAdapter;
adding a source means adding an entry here, not writing a new adapter.
"""

import copy
import os
from typing import Optional

from livestock_news.models import SourceConfig

SOURCE_TIMEOUT = float(os.environ.get('SOURCE_TIMEOUT', 10))

SOURCES = [
    SourceConfig(
        tag='fwi',
        name='Farmers Weekly',
        base_url='https://www.fwi.co.uk',
        feed_url='https://www.fwi.co.uk/livestock/feed',
        listing_url='https://www.fwi.co.uk/livestock',
        container_selectors=[
            'article',
            '.td_module_wrap',
            '.listing-item',
            'a[href*="/livestock/"]',
        ],
        timeout=SOURCE_TIMEOUT,
    ),
    SourceConfig(
        tag='wlj',
        name='Western Livestock Journal',
        base_url='https://www.wlj.net',
        listing_url='https://www.wlj.net/',
        container_selectors=[
            'article.tnt-asset-type-article',
            'article',
            '.card-container',
            'a[href*="article_"]',
        ],
        timeout=SOURCE_TIMEOUT,
    ),
    SourceConfig(
        tag='sf',
        name='The Scottish Farmer',
        base_url='https://www.thescottishfarmer.co.uk',
        listing_url='https://www.thescottishfarmer.co.uk/news/',
        container_selectors=[
            'article',
            '.mar-article-list__item',
            '.article-list-item',
            'a[href*="/news/"]',
        ],
        timeout=SOURCE_TIMEOUT,
    ),
    SourceConfig(
        tag='apha',
        name='APHA Press Releases',
        base_url='https://www.gov.uk',
        feed_url=(
            'https://www.gov.uk/search/news-and-communications.atom'
            '?organisations%5B%5D=animal-and-plant-health-agency'
        ),
        always_include=True,
        fetch_summaries=False,
        timeout=SOURCE_TIMEOUT,
    ),
]


def get_sources() -> list[SourceConfig]:
    """Fresh copies of the catalogue, safe to mutate per request."""
    return copy.deepcopy(SOURCES)


def get_source(tag: str) -> Optional[SourceConfig]:
    """Look up one source by tag."""
    for source in SOURCES:
        if source.tag == tag:
            return copy.deepcopy(source)
    return None
