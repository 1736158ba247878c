#!/usr/bin/env python3
"""Tests for calculation helper functions."""
from datetime import date

from fleet import (
    Status,
    calc_mileage_limit,
    calc_next_service_date,
    check_expiry,
    days_until,
    escalate,
)


class TestCalcNextServiceDate:
    """Tests for calc_next_service_date."""

    def test_three_months_later(self):
        assert calc_next_service_date(date(2025, 1, 15)) == date(2025, 4, 15)

    def test_clamps_to_month_end(self):
        """Nov 30 + 3 months lands on the last day of February."""
        assert calc_next_service_date(date(2025, 11, 30)) == date(2026, 2, 28)

    def test_custom_interval(self):
        assert calc_next_service_date(date(2025, 1, 15), 6) == date(2025, 7, 15)


class TestCalcMileageLimit:
    """Tests for calc_mileage_limit."""

    def test_adds_interval(self):
        assert calc_mileage_limit(10000) == 15000

    def test_custom_interval(self):
        assert calc_mileage_limit(10000, 10000) == 20000


class TestDaysUntil:
    """Tests for days_until."""

    def test_future(self):
        assert days_until(date(2026, 1, 8), date(2026, 1, 1)) == 7

    def test_same_day(self):
        assert days_until(date(2026, 1, 1), date(2026, 1, 1)) == 0

    def test_past(self):
        assert days_until(date(2025, 12, 31), date(2026, 1, 1)) == -1


class TestCheckExpiry:
    """Tests for check_expiry."""

    def test_expired(self):
        assert check_expiry(-1) == Status.CRITICAL

    def test_within_lead_time(self):
        assert check_expiry(0) == Status.WARNING
        assert check_expiry(7) == Status.WARNING

    def test_outside_lead_time(self):
        assert check_expiry(8) == Status.ACTIVE


class TestEscalate:
    """Tests for escalate."""

    def test_raises_severity(self):
        assert escalate(Status.ACTIVE, Status.WARNING) == Status.WARNING
        assert escalate(Status.WARNING, Status.CRITICAL) == Status.CRITICAL

    def test_never_downgrades(self):
        assert escalate(Status.CRITICAL, Status.WARNING) == Status.CRITICAL
        assert escalate(Status.CRITICAL, Status.ACTIVE) == Status.CRITICAL
        assert escalate(Status.WARNING, Status.ACTIVE) == Status.WARNING
