"""Flask web application serving the fleet dashboard and intake forms."""

from flask import Flask, jsonify, request

from fleet import (
    CARS,
    INCIDENTS,
    FormError,
    Status,
    YamlStore,
    add_vehicle,
    compose_incident_message,
    evaluate,
    find_vehicle,
    format_date,
    import_vehicles,
    incident_from_record,
    report_incident,
    share_url,
    unwrap_date,
    vehicles_from_snapshot,
)
from fleet.config import get_settings
from fleet.logger import get_logger

logger = get_logger(__name__)

settings = get_settings()

app = Flask(__name__)
app.secret_key = settings.SECRET_KEY
app.config["STORE"] = YamlStore(settings.DATA_FILE)
app.config["ZERO_MILEAGE_IS_VALID"] = settings.ZERO_MILEAGE_IS_VALID


def get_store() -> YamlStore:
    return app.config["STORE"]


def status_color(status: Status) -> str:
    """Get Tailwind color classes for a status card."""
    colors = {
        Status.CRITICAL: "border-red-600 bg-red-600 text-white",
        Status.WARNING: "border-yellow-600 bg-yellow-500 text-black",
        Status.ACTIVE: "border-gray-700 bg-sentinel-green text-black",
    }
    return colors.get(status, "border-gray-700")


def vehicle_card(vehicle) -> dict:
    """Dashboard card for one vehicle."""
    result = evaluate(vehicle, zero_mileage_is_valid=app.config["ZERO_MILEAGE_IS_VALID"])
    return {
        "id": vehicle.id,
        "plateNumber": vehicle.plate_number,
        "color": vehicle.color,
        "status": result.status.name,
        "statusColor": status_color(result.status),
        "alerts": result.alerts,
        "currentMileage": vehicle.current_mileage,
        "lastServiceMileage": vehicle.last_service_mileage,
        "lastServiceDate": format_date(vehicle.last_service_date),
        "roadTaxExpiry": format_date(vehicle.road_tax_expiry),
        "insuranceExpiry": format_date(vehicle.insurance_expiry),
    }


def incident_row(incident) -> dict:
    return {
        "id": incident.id,
        "carId": incident.car_id,
        "plateNumber": incident.plate_number,
        "type": incident.type.value,
        "severity": incident.severity.value,
        "date": format_date(incident.date),
        "description": incident.description,
        "status": incident.status.value,
    }


def form_data() -> dict:
    """Form fields from either a JSON body or a form post."""
    return request.get_json(silent=True) or request.form.to_dict()


@app.errorhandler(FormError)
def handle_form_error(error: FormError):
    return jsonify({"error": str(error)}), 400


@app.route("/")
def index():
    """Dashboard showing all vehicles."""
    vehicles = vehicles_from_snapshot(get_store().get_all(CARS))
    cards = [vehicle_card(v) for v in vehicles]
    return jsonify({"units": len(cards), "vehicles": cards})


@app.route("/vehicle/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Status card for one vehicle."""
    vehicle = find_vehicle(get_store(), vehicle_id)
    if vehicle is None:
        return jsonify({"error": f"Vehicle '{vehicle_id}' not found"}), 404
    return jsonify(vehicle_card(vehicle))


@app.route("/add", methods=["POST"])
def add():
    """Handle new vehicle form submission."""
    vehicle = add_vehicle(get_store(), form_data())
    logger.info(f"Added vehicle {vehicle.plate_number}")
    return jsonify(vehicle_card(vehicle)), 201


@app.route("/import", methods=["POST"])
def bulk_import():
    """Handle a bulk import of already-split spreadsheet rows."""
    rows = request.get_json(silent=True)
    if not isinstance(rows, list):
        return jsonify({"error": "Expected a JSON list of rows"}), 400
    vehicles = import_vehicles(get_store(), rows)
    logger.info(f"Imported {len(vehicles)} vehicles")
    return jsonify({"imported": len(vehicles)}), 201


@app.route("/report", methods=["POST"])
def report():
    """Handle incident report submission."""
    incident = report_incident(get_store(), form_data())
    message = compose_incident_message(incident)
    body = incident_row(incident)
    body["shareUrl"] = share_url(message)
    return jsonify(body), 201


@app.route("/incidents")
def incidents():
    """List incident reports, newest incident date first."""
    rows = [incident_from_record(r) for r in get_store().get_all(INCIDENTS)]
    if request.args.get("status"):
        rows = [i for i in rows if i.status.value == request.args["status"].upper()]
    rows.sort(key=lambda i: unwrap_date(i.date), reverse=True)
    return jsonify([incident_row(i) for i in rows])


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)
