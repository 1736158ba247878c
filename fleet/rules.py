"""Status rule engine: turns a vehicle record into a status and alerts."""

from datetime import date, datetime
from typing import Optional, Union

from .calculations import (
    calc_mileage_limit,
    calc_next_service_date,
    check_expiry,
    days_until,
    escalate,
)
from .dates import unwrap_date
from .status import Status
from .status_result import StatusResult
from .vehicle import EXPIRY_FIELDS, Vehicle


def _has_mileage(value: Optional[int], zero_is_valid: bool) -> bool:
    if zero_is_valid:
        return value is not None
    return bool(value)


def evaluate(
    vehicle: Vehicle,
    reference_date: Optional[Union[date, datetime]] = None,
    zero_mileage_is_valid: bool = False,
) -> StatusResult:
    """
    Evaluate a vehicle against the fleet compliance rules.

    Rules (all run, each may only raise the status):
    1. Service by time: overdue once past last service + 3 months
    2. Service by mileage: overdue at last service mileage + 5000km
    3. Road tax: EXPIRED when past, warning within 7 days
    4. Insurance: same as road tax

    Alerts are listed in rule order. Mileage readings of zero count as
    missing unless zero_mileage_is_valid is set.
    """
    today = unwrap_date(reference_date) or date.today()
    result = StatusResult()

    last_service = unwrap_date(vehicle.last_service_date)
    if last_service is not None:
        if today > calc_next_service_date(last_service):
            result.status = escalate(result.status, Status.CRITICAL)
            result.alerts.append("Service Overdue (Time limit)")

    current = vehicle.current_mileage
    last_mileage = vehicle.last_service_mileage
    if _has_mileage(current, zero_mileage_is_valid) and _has_mileage(
        last_mileage, zero_mileage_is_valid
    ):
        limit = calc_mileage_limit(last_mileage)
        if current >= limit:
            result.status = escalate(result.status, Status.CRITICAL)
            result.alerts.append(f"Service Overdue (Mileage +{current - limit}km)")

    for attr, label in EXPIRY_FIELDS:
        expiry = vehicle.expiry(attr)
        if expiry is None:
            continue
        days_left = days_until(expiry, today)
        expiry_status = check_expiry(days_left)
        if expiry_status == Status.CRITICAL:
            result.alerts.append(f"{label} EXPIRED")
        elif expiry_status == Status.WARNING:
            result.alerts.append(f"{label} expires in {days_left} days")
        result.status = escalate(result.status, expiry_status)

    return result
