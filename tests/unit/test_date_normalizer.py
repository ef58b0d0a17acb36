"""
Unit tests for date normalization.

Covers relative expressions, absolute formats and the today fallback.
"""

from datetime import date, timedelta

import pytest

from livestock_news.models import DateConfidence
from livestock_news.services.date_normalizer import (
    normalize_date,
    normalize_date_with_confidence,
    utc_today,
)


class TestRelativeDates:
    """Tests for 'N days ago', 'today' and 'yesterday' style dates."""

    def test_days_ago(self, today):
        assert normalize_date("3 days ago", today) == today - timedelta(days=3)

    def test_single_day_ago(self, today):
        assert normalize_date("1 day ago", today) == today - timedelta(days=1)

    def test_days_ago_case_insensitive(self, today):
        assert normalize_date("Posted 5 DAYS AGO", today) == today - timedelta(days=5)

    def test_hours_ago_is_today(self, today):
        assert normalize_date("4 hours ago", today) == today

    def test_minutes_ago_is_today(self, today):
        assert normalize_date("25 mins ago", today) == today

    def test_today_keyword(self, today):
        assert normalize_date("Today, 10:15", today) == today

    def test_yesterday(self, today):
        assert normalize_date("Yesterday", today) == today - timedelta(days=1)

    def test_relative_dates_are_exact(self, today):
        result = normalize_date_with_confidence("2 days ago", today)
        assert result.confidence == DateConfidence.EXACT

    @pytest.mark.parametrize("value", ["99999999 days ago", "99999999999 days ago"])
    def test_out_of_range_days_ago_falls_back_to_today(self, today, value):
        assert normalize_date_with_confidence(value, today) == (today, DateConfidence.INFERRED)


class TestAbsoluteDates:
    """Tests for calendar dates parsed with python-dateutil."""

    def test_iso_date(self, today):
        assert normalize_date("2024-01-15", today) == date(2024, 1, 15)

    def test_rfc822_date(self, today):
        assert normalize_date("Mon, 18 Mar 2024 09:30:00 GMT", today) == date(2024, 3, 18)

    def test_iso_datetime_with_offset_converted_to_utc(self, today):
        # 23:30 at UTC-5 is already the next day in UTC
        assert normalize_date("2024-03-14T23:30:00-05:00", today) == date(2024, 3, 15)

    def test_long_form_date(self, today):
        assert normalize_date("14 March 2024", today) == date(2024, 3, 14)

    def test_absolute_date_is_exact(self, today):
        result = normalize_date_with_confidence("2024-01-15", today)
        assert result == (date(2024, 1, 15), DateConfidence.EXACT)

    def test_yearless_date_uses_reference_year(self, today):
        assert normalize_date("14 March", today) == date(2024, 3, 14)

    def test_yearless_date_after_today_is_last_year(self, today):
        assert normalize_date("14 December", today) == date(2023, 12, 14)

    def test_yearless_date_in_january(self):
        assert normalize_date("30 Dec", date(2025, 1, 3)) == date(2024, 12, 30)

    def test_explicit_future_year_kept(self, today):
        assert normalize_date("14 December 2024", today) == date(2024, 12, 14)


class TestFallback:
    """Tests for the today fallback."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_today(self, today, value):
        assert normalize_date(value, today) == today

    def test_garbage_is_today(self, today):
        assert normalize_date("garbage text", today) == today

    def test_fallback_is_inferred(self, today):
        result = normalize_date_with_confidence("garbage text", today)
        assert result.value == today
        assert result.confidence == DateConfidence.INFERRED

    def test_missing_date_is_inferred(self, today):
        assert normalize_date_with_confidence(None, today).confidence == DateConfidence.INFERRED

    def test_defaults_to_utc_today(self):
        assert normalize_date(None) == utc_today()
