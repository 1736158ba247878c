#!/usr/bin/env python3
"""
Unified CLI for fleet compliance tracking.

Commands:
  status     - Show every vehicle's status and alerts
  add        - Add a vehicle
  import     - Bulk-import vehicles from a YAML list of rows
  report     - File an incident report
  incidents  - List incident reports
  notify     - Reschedule expiry alarms from the current fleet
  sweep      - Run the daily expiry check once
  worker     - Run the daily expiry check on its schedule
"""

import argparse
import sys
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

import yaml

from fleet import (
    CARS,
    INCIDENTS,
    Alarm,
    FileAlarmSubsystem,
    FormError,
    Incident,
    Permission,
    Status,
    Vehicle,
    YamlStore,
    add_vehicle,
    build_scheduler,
    compose_incident_message,
    evaluate,
    format_date,
    import_vehicles,
    incident_from_record,
    local_today,
    report_incident,
    run_daily_check,
    schedule_clean_notifications,
    share_url,
    vehicles_from_snapshot,
)
from fleet.config import get_settings

# =============================================================================
# Formatting helpers
# =============================================================================


def format_mileage(mileage: Optional[int]) -> str:
    """Format an odometer reading for display."""
    return f"{mileage:,} km" if mileage is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Status command
# =============================================================================


def make_status_table(
    vehicles: List[Vehicle], zero_mileage_is_valid: bool = False
) -> List[List[str]]:
    """Convert vehicles to dashboard rows, most urgent first."""
    evaluated = [
        (v, evaluate(v, zero_mileage_is_valid=zero_mileage_is_valid)) for v in vehicles
    ]
    evaluated.sort(key=lambda pair: (pair[1].status.value, pair[0].plate_number))

    rows = []
    for vehicle, result in evaluated:
        rows.append(
            [
                vehicle.plate_number,
                result.status.name,
                format_mileage(vehicle.current_mileage),
                format_date(vehicle.last_service_date),
                format_date(vehicle.road_tax_expiry),
                format_date(vehicle.insurance_expiry),
                "; ".join(result.alerts) or "-",
            ]
        )
    return rows


def cmd_status(args, store):
    """Show every vehicle's status and alerts."""
    settings = get_settings()
    vehicles = vehicles_from_snapshot(store.get_all(CARS))

    print(f"UNITS: {len(vehicles)}")
    print()
    if not vehicles:
        print("No vehicles found.")
        return 0

    rows = make_status_table(vehicles, settings.ZERO_MILEAGE_IS_VALID)
    if args.only:
        rows = [row for row in rows if row[1] == Status[args.only.upper()].name]

    headers = [
        "Plate",
        "Status",
        "Mileage",
        "Last Service",
        "Roadtax Exp",
        "Insurance Exp",
        "Alerts",
    ]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Add / Import commands
# =============================================================================


def cmd_add(args, store):
    """Add a vehicle."""
    form = {
        "plateNumber": args.plate,
        "color": args.color,
        "lastServiceDate": args.last_service_date,
        "lastServiceMileage": args.last_service_mileage,
        "currentMileage": args.current_mileage,
        "roadTaxExpiry": args.road_tax_expiry,
        "insuranceExpiry": args.insurance_expiry,
    }
    try:
        vehicle = add_vehicle(store, form)
    except FormError as e:
        print(f"Error: {e}")
        return 1

    print(f"Added {vehicle.name} ({vehicle.id})")
    return 0


def cmd_import(args, store):
    """Bulk-import vehicles from a YAML list of rows."""
    if not args.rows_file.exists():
        print(f"Error: File not found: {args.rows_file}")
        return 1

    with open(args.rows_file, "r") as fp:
        rows = yaml.load(fp, Loader=yaml.SafeLoader) or []
    if not isinstance(rows, list):
        print("Error: Import file must contain a list of rows")
        return 1

    try:
        vehicles = import_vehicles(store, rows)
    except FormError as e:
        print(f"Error: {e}")
        print("(nothing imported)")
        return 1

    print(f"Imported {len(vehicles)} vehicle(s).")
    return 0


# =============================================================================
# Incident commands
# =============================================================================


def make_incident_table(incidents: List[Incident]) -> List[List[str]]:
    """Convert incidents to table rows."""
    rows = []
    for incident in incidents:
        rows.append(
            [
                format_date(incident.date),
                incident.plate_number,
                incident.type.value,
                incident.severity.value,
                incident.status.value,
                truncate(incident.description),
            ]
        )
    return rows


def cmd_report(args, store):
    """File an incident report."""
    form = {
        "carId": args.car_id,
        "type": args.type,
        "severity": args.severity,
        "date": args.date,
        "description": args.description,
    }
    try:
        incident = report_incident(store, form)
    except FormError as e:
        print(f"Error: {e}")
        return 1

    print("Incident Report Submitted Successfully.")
    if args.share:
        message = compose_incident_message(incident)
        print()
        print(message)
        print()
        print(share_url(message))
    return 0


def cmd_incidents(args, store):
    """List incident reports."""
    incidents = [incident_from_record(r) for r in store.get_all(INCIDENTS)]
    if args.open:
        incidents = [i for i in incidents if i.is_open]

    if not incidents:
        print("No incidents found.")
        return 0

    headers = ["Date", "Plate", "Type", "Severity", "Status", "Description"]
    print(tabulate(make_incident_table(incidents), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Notify / Sweep / Worker commands
# =============================================================================


def make_alarm_table(alarms: List[Alarm]) -> List[List[str]]:
    """Convert alarms to table rows."""
    return [
        [str(a.id), a.fire_at.strftime("%d/%m/%Y %H:%M"), a.title, a.body]
        for a in alarms
    ]


def cmd_notify(args, store):
    """Reschedule expiry alarms from the current fleet."""
    settings = get_settings()
    alarms_file = args.alarms or Path(settings.ALARMS_FILE)
    subsystem = FileAlarmSubsystem(alarms_file)

    if subsystem.request_permission() != Permission.GRANTED:
        print("Error: Notification permission denied")
        return 1

    vehicles = vehicles_from_snapshot(store.get_all(CARS))
    alarms = schedule_clean_notifications(vehicles, subsystem)

    print(f"Scheduled {len(alarms)} alarm(s) in {alarms_file}")
    if alarms:
        print()
        headers = ["ID", "Fires At", "Title", "Body"]
        print(tabulate(make_alarm_table(alarms), headers=headers, tablefmt="simple"))
    return 0


def cmd_sweep(args, store):
    """Run the daily expiry check once."""
    settings = get_settings()
    alerts = run_daily_check(store, today=local_today(settings.TIMEZONE))
    if not alerts:
        print("No expiries in exactly 7 days.")
        return 0
    for alert in alerts:
        print(f"[ALERT] {alert.message}")
    return 0


def cmd_worker(args, store):
    """Run the daily expiry check on its schedule."""
    settings = get_settings()
    scheduler = build_scheduler(store, settings)
    print(f"Daily check scheduled ({settings.SWEEP_CRON}, {settings.TIMEZONE})")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        print("Shutting down worker...")
    return 0


# =============================================================================
# Main
# =============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Fleet compliance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status
  %(prog)s status --only critical
  %(prog)s add WLA1234 --road-tax-expiry 15/05/2026 --current-mileage 42000
  %(prog)s import rows.yaml
  %(prog)s report <car-id> --date 31/01/2026 --type Breakdown --share
  %(prog)s notify
  %(prog)s --data fleet.yaml sweep
""",
    )
    parser.add_argument(
        "--data",
        type=Path,
        help="Path to fleet YAML file (default: SENTINEL_DATA_FILE or fleet.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show every vehicle's status and alerts"
    )
    status_parser.add_argument(
        "--only",
        choices=["critical", "warning", "active"],
        help="Show only vehicles with this status",
    )

    # Add subcommand
    add_parser = subparsers.add_parser("add", help="Add a vehicle")
    add_parser.add_argument("plate", type=str, help="Plate number (e.g., 'WLA 1234')")
    add_parser.add_argument("--color", type=str, help="Vehicle colour")
    add_parser.add_argument(
        "--last-service-date", type=str, help="Last service date (dd/mm/yyyy)"
    )
    add_parser.add_argument(
        "--last-service-mileage", type=str, help="Odometer at last service"
    )
    add_parser.add_argument("--current-mileage", type=str, help="Current odometer")
    add_parser.add_argument(
        "--road-tax-expiry", type=str, help="Road tax expiry (dd/mm/yyyy)"
    )
    add_parser.add_argument(
        "--insurance-expiry", type=str, help="Insurance expiry (dd/mm/yyyy)"
    )

    # Import subcommand
    import_parser = subparsers.add_parser(
        "import", help="Bulk-import vehicles from a YAML list of rows"
    )
    import_parser.add_argument(
        "rows_file",
        type=Path,
        help="YAML file holding a list of rows with plateNumber, roadTaxExpiry, ...",
    )

    # Report subcommand
    report_parser = subparsers.add_parser("report", help="File an incident report")
    report_parser.add_argument("car_id", type=str, help="Vehicle id")
    report_parser.add_argument(
        "--date", type=str, required=True, help="Incident date (dd/mm/yyyy)"
    )
    report_parser.add_argument(
        "--type",
        choices=["Accident", "Breakdown", "Damage", "Maintenance", "Other"],
        default="Accident",
        help="Incident type (default: Accident)",
    )
    report_parser.add_argument(
        "--severity",
        choices=["Low", "Medium", "High", "Critical"],
        default="Medium",
        help="Severity (default: Medium)",
    )
    report_parser.add_argument(
        "--description", type=str, default="", help="Describe what happened"
    )
    report_parser.add_argument(
        "--share",
        action="store_true",
        help="Print the share message and WhatsApp link",
    )

    # Incidents subcommand
    incidents_parser = subparsers.add_parser("incidents", help="List incident reports")
    incidents_parser.add_argument(
        "--open", action="store_true", help="Only show OPEN incidents"
    )

    # Notify subcommand
    notify_parser = subparsers.add_parser(
        "notify", help="Reschedule expiry alarms from the current fleet"
    )
    notify_parser.add_argument(
        "--alarms",
        type=Path,
        help="Path to alarms YAML file (default: SENTINEL_ALARMS_FILE)",
    )

    # Sweep / Worker subcommands
    subparsers.add_parser("sweep", help="Run the daily expiry check once")
    subparsers.add_parser("worker", help="Run the daily expiry check on its schedule")

    args = parser.parse_args()

    store = YamlStore(args.data or get_settings().DATA_FILE)

    commands = {
        "status": cmd_status,
        "add": cmd_add,
        "import": cmd_import,
        "report": cmd_report,
        "incidents": cmd_incidents,
        "notify": cmd_notify,
        "sweep": cmd_sweep,
        "worker": cmd_worker,
    }
    return commands[args.command](args, store)


if __name__ == "__main__":
    sys.exit(main() or 0)
