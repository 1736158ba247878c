"""Conversion between store records (camelCase dicts) and model objects."""

from typing import Any, Dict, List, Optional

from .incident import Incident, IncidentStatus, IncidentType, Severity
from .vehicle import Vehicle

CARS = "cars"
INCIDENTS = "incidents"


def vehicle_from_record(dct: Dict[str, Any]) -> Vehicle:
    """Parse a cars record into a Vehicle."""
    return Vehicle(
        dct["plateNumber"],
        dct.get("color"),
        dct.get("lastServiceDate"),
        dct.get("lastServiceMileage"),
        dct.get("currentMileage"),
        dct.get("roadTaxExpiry"),
        dct.get("insuranceExpiry"),
        id=dct.get("id"),
    )


def vehicle_to_record(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the cars record format, omitting empty fields."""
    d: Dict[str, Any] = {"plateNumber": vehicle.plate_number}
    if vehicle.color is not None:
        d["color"] = vehicle.color
    if vehicle.last_service_date is not None:
        d["lastServiceDate"] = vehicle.last_service_date
    if vehicle.last_service_mileage is not None:
        d["lastServiceMileage"] = vehicle.last_service_mileage
    if vehicle.current_mileage is not None:
        d["currentMileage"] = vehicle.current_mileage
    if vehicle.road_tax_expiry is not None:
        d["roadTaxExpiry"] = vehicle.road_tax_expiry
    if vehicle.insurance_expiry is not None:
        d["insuranceExpiry"] = vehicle.insurance_expiry
    return d


def vehicles_from_snapshot(snapshot: List[Dict[str, Any]]) -> List[Vehicle]:
    return [vehicle_from_record(dct) for dct in snapshot]


def incident_from_record(dct: Dict[str, Any]) -> Incident:
    """Parse an incidents record into an Incident."""
    timestamp = dct.get("timestamp")
    return Incident(
        dct["carId"],
        dct["plateNumber"],
        IncidentType(dct["type"]),
        Severity(dct["severity"]),
        dct["date"],
        dct.get("description") or "",
        IncidentStatus(dct.get("status", IncidentStatus.OPEN.value)),
        timestamp.to_datetime() if hasattr(timestamp, "to_datetime") else timestamp,
        id=dct.get("id"),
    )


def incident_to_record(incident: Incident) -> Dict[str, Any]:
    """Serialize an Incident to the incidents record format."""
    d: Dict[str, Any] = {
        "carId": incident.car_id,
        "plateNumber": incident.plate_number,
        "type": incident.type.value,
        "severity": incident.severity.value,
        "description": incident.description,
        "date": incident.date,
        "status": incident.status.value,
    }
    if incident.timestamp is not None:
        d["timestamp"] = incident.timestamp
    return d


def find_vehicle(store, vehicle_id: str) -> Optional[Vehicle]:
    """Look up a single vehicle by id."""
    for record in store.get_all(CARS):
        if record.get("id") == vehicle_id:
            return vehicle_from_record(record)
    return None
