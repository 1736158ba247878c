#!/usr/bin/env python3
"""Tests for strict date parsing and formatting."""
import pytest
from datetime import date, datetime

from fleet import Timestamp, format_date, parse_strict_date, unwrap_date


class TestParseStrictDate:
    """Tests for parse_strict_date."""

    def test_valid_date(self):
        assert parse_strict_date("31/01/2026") == date(2026, 1, 31)

    def test_leap_day(self):
        assert parse_strict_date("29/02/2028") == date(2028, 2, 29)

    @pytest.mark.parametrize(
        "text",
        [
            "31/02/2026",  # no such day
            "29/02/2026",  # not a leap year
            "1/1/2026",  # not zero-padded
            "01/1/2026",
            "2026-01-31",  # wrong order
            "31-01-2026",  # wrong separator
            "31/01/26",  # two-digit year
            "",
            " 31/01/2026",
            "31/13/2026",
            "00/01/2026",
        ],
    )
    def test_rejects_malformed(self, text):
        assert parse_strict_date(text) is None

    def test_rejects_non_string(self):
        assert parse_strict_date(None) is None
        assert parse_strict_date(date(2026, 1, 31)) is None


class TestFormatDate:
    """Tests for format_date."""

    def test_formats_date(self):
        assert format_date(date(2026, 1, 5)) == "05/01/2026"

    def test_missing_returns_placeholder(self):
        assert format_date(None) == "---"

    def test_unwraps_store_timestamp(self):
        assert format_date(Timestamp(datetime(2026, 5, 15, 0, 0))) == "15/05/2026"

    def test_drops_time_of_day(self):
        assert format_date(datetime(2026, 5, 15, 23, 59)) == "15/05/2026"

    def test_round_trip(self):
        for day in (date(2026, 1, 31), date(2024, 2, 29), date(1999, 12, 1)):
            assert parse_strict_date(format_date(day)) == day


class TestUnwrapDate:
    """Tests for unwrap_date."""

    def test_none(self):
        assert unwrap_date(None) is None

    def test_plain_date_unchanged(self):
        assert unwrap_date(date(2026, 1, 1)) == date(2026, 1, 1)

    def test_timestamp_and_datetime(self):
        assert unwrap_date(Timestamp(datetime(2026, 1, 1, 9))) == date(2026, 1, 1)
        assert unwrap_date(datetime(2026, 1, 1, 9)) == date(2026, 1, 1)
