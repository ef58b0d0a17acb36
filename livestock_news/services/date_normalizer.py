"""
Date Normalizer Service

Turns the free-form dates found on listing pages and feeds ("3 days ago",
"Yesterday", RFC 822, ISO 8601, nothing at all) into a calendar date.

Unreadable dates fall back to today. The fallback is reported through
DateConfidence.INFERRED so callers can tell it apart from a real date.
"""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple, Optional

from dateutil import parser as date_parser

from livestock_news.models import DateConfidence

logger = logging.getLogger(__name__)

DAYS_AGO_PATTERN = re.compile(r'(\d+)\s+days?\s+ago', re.IGNORECASE)
HOURS_AGO_PATTERN = re.compile(r'(\d+)\s+(hours?|hrs?|minutes?|mins?)\s+ago', re.IGNORECASE)


class NormalizedDate(NamedTuple):
    value: date
    confidence: DateConfidence


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def normalize_date_with_confidence(text: Optional[str], today: Optional[date] = None) -> NormalizedDate:
    """
    Normalize a date expression, reporting whether the today-fallback was used.

    Rules (first match wins):
    1. Empty input -> today (inferred)
    2. "<N> day(s) ago" -> today - N
    3. "<N> hour(s) ago", "<N> min(s) ago" or "today" -> today
    4. "yesterday" -> today - 1
    5. Any date python-dateutil can parse
    6. Otherwise -> today (inferred)

    Args:
        text: Raw date text from the source
        today: Reference date (defaults to the UTC date)

    Returns:
        NormalizedDate(value, confidence)
    """
    if today is None:
        today = utc_today()

    if not text or not text.strip():
        return NormalizedDate(today, DateConfidence.INFERRED)

    text = text.strip()
    lowered = text.lower()

    match = DAYS_AGO_PATTERN.search(text)
    if match:
        try:
            return NormalizedDate(today - timedelta(days=int(match.group(1))), DateConfidence.EXACT)
        except (OverflowError, ValueError):
            logger.debug(f"Out of range relative date '{text[:60]}', assuming today")
            return NormalizedDate(today, DateConfidence.INFERRED)

    if HOURS_AGO_PATTERN.search(text) or 'today' in lowered:
        return NormalizedDate(today, DateConfidence.EXACT)

    if 'yesterday' in lowered:
        return NormalizedDate(today - timedelta(days=1), DateConfidence.EXACT)

    parsed = _parse_calendar_date(text, today)
    if parsed is not None:
        return NormalizedDate(parsed, DateConfidence.EXACT)

    logger.debug(f"Unparseable date '{text[:60]}', assuming today")
    return NormalizedDate(today, DateConfidence.INFERRED)


def normalize_date(text: Optional[str], today: Optional[date] = None) -> date:
    """Normalize a date expression to a calendar date. Never raises."""
    return normalize_date_with_confidence(text, today).value


def _parse_calendar_date(text: str, today: date) -> Optional[date]:
    """
    Generic parse of a date string; aware values are converted to UTC.

    Missing fields are filled from today. A date without a year that would
    land after today is taken as last year's.
    """
    default = datetime.combine(today, time.min)
    parsed = _parse(text, default)
    if parsed is None:
        return None

    if parsed > today:
        earlier = _parse(text, _year_before(default))
        if earlier is not None and earlier.year != parsed.year:
            return earlier
    return parsed


def _parse(text: str, default: datetime) -> Optional[date]:
    try:
        parsed = date_parser.parse(text, default=default)
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def _year_before(value: datetime) -> datetime:
    try:
        return value.replace(year=value.year - 1)
    except ValueError:
        # 29 February
        return value.replace(year=value.year - 1, day=28)
