"""Validation of hand-entered and imported data before it reaches the store."""

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import quote

from .dates import DATE_FORMAT_HINT, format_date, parse_strict_date
from .incident import Incident, IncidentStatus, IncidentType, Severity
from .records import (
    CARS,
    INCIDENTS,
    incident_to_record,
    vehicle_to_record,
    vehicles_from_snapshot,
)
from .vehicle import Vehicle

SHARE_URL = "https://wa.me/?text="


class FormError(ValueError):
    """Submitted data was rejected; nothing was written."""


class InvalidDateError(FormError):
    """A date field was not a real date in the DD/MM/YYYY form."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid date for {field}: {value!r}. "
            f"Please use strict format: {DATE_FORMAT_HINT}"
        )


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_mapping(form: Any) -> None:
    if not isinstance(form, Mapping):
        raise FormError(f"Expected a set of named fields, got {form!r}")


def _parse_date(value: Any) -> Optional[date]:
    return parse_strict_date(value.strip() if isinstance(value, str) else value)


def _optional_date(form: Mapping[str, Any], key: str) -> Optional[date]:
    value = form.get(key)
    if _blank(value):
        return None
    parsed = _parse_date(value)
    if parsed is None:
        raise InvalidDateError(key, value)
    return parsed


def _optional_mileage(form: Mapping[str, Any], key: str) -> Optional[int]:
    value = form.get(key)
    if _blank(value):
        return None
    # bool is an int subclass
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise FormError(f"Invalid mileage for {key}: {value!r}")
    try:
        mileage = int(value)
    except (TypeError, ValueError):
        raise FormError(f"Invalid mileage for {key}: {value!r}")
    if mileage < 0:
        raise FormError(f"Mileage for {key} cannot be negative")
    return mileage


def vehicle_from_form(form: Mapping[str, Any]) -> Vehicle:
    """
    Build a Vehicle from form fields (camelCase keys, DD/MM/YYYY dates).

    Blank optional fields are left unset; a non-blank field that does not
    parse rejects the whole form.
    """
    _require_mapping(form)
    plate = form.get("plateNumber")
    if _blank(plate):
        raise FormError("Plate number is required")
    return Vehicle(
        plate_number=plate,
        color=None if _blank(form.get("color")) else form.get("color"),
        last_service_date=_optional_date(form, "lastServiceDate"),
        last_service_mileage=_optional_mileage(form, "lastServiceMileage"),
        current_mileage=_optional_mileage(form, "currentMileage"),
        road_tax_expiry=_optional_date(form, "roadTaxExpiry"),
        insurance_expiry=_optional_date(form, "insuranceExpiry"),
    )


def add_vehicle(store, form: Mapping[str, Any]) -> Vehicle:
    """Validate a new-vehicle form and write it to the store."""
    vehicle = vehicle_from_form(form)
    vehicle.id = store.add_one(CARS, vehicle_to_record(vehicle))
    return vehicle


def import_vehicles(store, rows: Iterable[Mapping[str, Any]]) -> List[Vehicle]:
    """
    Bulk-import vehicle rows in one batch write.

    Every row is validated before anything is written; one bad row
    rejects the whole import.
    """
    vehicles = []
    for number, row in enumerate(rows, start=1):
        try:
            vehicles.append(vehicle_from_form(row))
        except ValueError as e:
            raise FormError(f"Row {number}: {e}") from e

    if not vehicles:
        return []

    ids = store.add_batch(CARS, [vehicle_to_record(v) for v in vehicles])
    for vehicle, vehicle_id in zip(vehicles, ids):
        vehicle.id = vehicle_id
    return vehicles


def incident_from_form(
    form: Mapping[str, Any],
    vehicles: Iterable[Vehicle],
    now: Optional[datetime] = None,
) -> Incident:
    """Build an OPEN Incident for one of the known vehicles."""
    _require_mapping(form)
    car_id = form.get("carId")
    if _blank(car_id):
        raise FormError("Please select a vehicle.")
    vehicle = next((v for v in vehicles if v.id == car_id), None)
    if vehicle is None:
        raise FormError(f"Unknown vehicle: {car_id}")

    incident_date = _parse_date(form.get("date"))
    if incident_date is None:
        raise InvalidDateError("date", form.get("date"))

    try:
        incident_type = IncidentType(form.get("type") or IncidentType.ACCIDENT.value)
        severity = Severity(form.get("severity") or Severity.MEDIUM.value)
    except ValueError as e:
        raise FormError(str(e)) from e

    return Incident(
        car_id=vehicle.id,
        plate_number=vehicle.plate_number,
        type=incident_type,
        severity=severity,
        date=incident_date,
        description=form.get("description") or "",
        status=IncidentStatus.OPEN,
        timestamp=now or datetime.now(),
    )


def report_incident(store, form: Mapping[str, Any]) -> Incident:
    """Validate an incident report against the current fleet and store it."""
    vehicles = vehicles_from_snapshot(store.get_all(CARS))
    incident = incident_from_form(form, vehicles)
    incident.id = store.add_one(INCIDENTS, incident_to_record(incident))
    return incident


def compose_incident_message(incident: Incident) -> str:
    """Plain-text incident summary for sharing outside the app."""
    return (
        "*INCIDENT REPORT*\n\n"
        f"*Vehicle:* {incident.plate_number}\n"
        f"*Type:* {incident.type.value}\n"
        f"*Severity:* {incident.severity.value}\n"
        f"*Date:* {format_date(incident.date)}\n"
        f"*Description:* {incident.description}"
    )


def share_url(text: str) -> str:
    """Build a WhatsApp share link for a message."""
    return SHARE_URL + quote(text, safe="")
