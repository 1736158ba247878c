"""Helper functions for compliance rule calculations."""

from datetime import date
from dateutil.relativedelta import relativedelta

from .status import Status

SERVICE_INTERVAL_MONTHS = 3
SERVICE_INTERVAL_KM = 5000
LEAD_TIME_DAYS = 7


def calc_next_service_date(
    last_date: date, interval_months: int = SERVICE_INTERVAL_MONTHS
) -> date:
    """Calculate next service date: last + interval months (clamped to month end)."""
    return last_date + relativedelta(months=interval_months)


def calc_mileage_limit(
    last_mileage: int, interval_km: int = SERVICE_INTERVAL_KM
) -> int:
    """Calculate the odometer reading at which the next service falls due."""
    return last_mileage + interval_km


def days_until(target: date, today: date) -> int:
    """Whole days from today to target (negative once target has passed)."""
    return (target - today).days


def check_expiry(days_left: int, lead_time: int = LEAD_TIME_DAYS) -> Status:
    """Determine status of an expiry given the days left before it."""
    if days_left < 0:
        return Status.CRITICAL
    if days_left <= lead_time:
        return Status.WARNING
    return Status.ACTIVE


def escalate(current: Status, candidate: Status) -> Status:
    """Return the more urgent of two statuses; never downgrades."""
    if candidate.value < current.value:  # CRITICAL < WARNING < ACTIVE
        return candidate
    return current
