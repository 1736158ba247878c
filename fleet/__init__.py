"""
Fleet compliance tracking models.

This package provides the pieces of the fleet tracker:
- Status: Compliance levels (CRITICAL, WARNING, ACTIVE)
- Vehicle / Incident: Stored records
- evaluate: Status rule engine producing a StatusResult
- YamlStore: Document store with live watchers
- schedule_clean_notifications: Device alarm scheduling
- daily_check: Exact-day expiry sweep
"""

from .status import Status
from .dates import parse_strict_date, format_date, unwrap_date
from .calculations import (
    calc_next_service_date,
    calc_mileage_limit,
    days_until,
    check_expiry,
    escalate,
)
from .vehicle import Vehicle
from .incident import Incident, IncidentType, Severity, IncidentStatus
from .status_result import StatusResult
from .rules import evaluate
from .store import YamlStore, Timestamp
from .records import (
    CARS,
    INCIDENTS,
    vehicle_from_record,
    vehicle_to_record,
    vehicles_from_snapshot,
    incident_from_record,
    incident_to_record,
    find_vehicle,
)
from .alarms import (
    Alarm,
    AlarmSubsystem,
    MemoryAlarmSubsystem,
    FileAlarmSubsystem,
    Permission,
    build_alarms,
    schedule_clean_notifications,
    watch_vehicles,
)
from .sweep import SweepAlert, daily_check, local_today, run_daily_check, build_scheduler
from .intake import (
    FormError,
    InvalidDateError,
    vehicle_from_form,
    add_vehicle,
    import_vehicles,
    incident_from_form,
    report_incident,
    compose_incident_message,
    share_url,
)

__all__ = [
    "Status",
    "parse_strict_date",
    "format_date",
    "unwrap_date",
    "calc_next_service_date",
    "calc_mileage_limit",
    "days_until",
    "check_expiry",
    "escalate",
    "Vehicle",
    "Incident",
    "IncidentType",
    "Severity",
    "IncidentStatus",
    "StatusResult",
    "evaluate",
    "YamlStore",
    "Timestamp",
    "CARS",
    "INCIDENTS",
    "vehicle_from_record",
    "vehicle_to_record",
    "vehicles_from_snapshot",
    "incident_from_record",
    "incident_to_record",
    "find_vehicle",
    "Alarm",
    "AlarmSubsystem",
    "MemoryAlarmSubsystem",
    "FileAlarmSubsystem",
    "Permission",
    "build_alarms",
    "schedule_clean_notifications",
    "watch_vehicles",
    "SweepAlert",
    "daily_check",
    "local_today",
    "run_daily_check",
    "build_scheduler",
    "FormError",
    "InvalidDateError",
    "vehicle_from_form",
    "add_vehicle",
    "import_vehicles",
    "incident_from_form",
    "report_incident",
    "compose_incident_message",
    "share_url",
]
