"""
Keyword matching for search requests.
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


def clean_keywords(values) -> list[str]:
    """
    Validate and tidy the keyword list from a search request.

    Strips whitespace, drops blank entries and collapses case-insensitive
    duplicates (first spelling wins). Order is preserved.

    Raises:
        ValueError: if values is not a list or contains non-string items
    """
    if not isinstance(values, list):
        raise ValueError("Keywords array is required")

    keywords = []
    seen = set()
    for value in values:
        if not isinstance(value, str):
            raise ValueError("Keywords must be strings")
        keyword = value.strip()
        if not keyword or keyword.lower() in seen:
            continue
        seen.add(keyword.lower())
        keywords.append(keyword)

    if not keywords:
        raise ValueError("At least one non-empty keyword is required")
    return keywords


def matched_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """
    Return the keywords found in text (case-insensitive substring match).

    Order follows the keywords iterable.
    """
    haystack = (text or '').lower()
    return [keyword for keyword in keywords if keyword and keyword.lower() in haystack]
