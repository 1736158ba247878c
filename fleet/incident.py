"""Incident class for vehicle incident reports."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional


class IncidentType(Enum):
    ACCIDENT = "Accident"
    BREAKDOWN = "Breakdown"
    DAMAGE = "Damage"
    MAINTENANCE = "Maintenance"
    OTHER = "Other"


class Severity(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class IncidentStatus(Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"


class Incident:
    """A report of something that happened to a vehicle. Written once."""

    def __init__(
        self,
        car_id: str,
        plate_number: str,
        type: IncidentType,
        severity: Severity,
        date: Any,
        description: str = "",
        status: IncidentStatus = IncidentStatus.OPEN,
        timestamp: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.car_id = car_id
        self.plate_number = plate_number
        self.type = type
        self.severity = severity
        self.date = date
        self.description = description
        self.status = status
        self.timestamp = timestamp

    @property
    def is_open(self) -> bool:
        return self.status == IncidentStatus.OPEN
