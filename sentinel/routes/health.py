import math
from datetime import datetime, timedelta

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from sentinel.extensions import db
from sentinel.models.health_reading import HealthReading
from sentinel.schemas.readings import HealthReadingSchema
from sentinel.utils.alerts import create_alerts, broadcast_alerts
from sentinel.utils.anomaly_detection import detect_health_anomalies

health_bp = Blueprint("health", __name__)
reading_schema = HealthReadingSchema()
readings_schema = HealthReadingSchema(many=True)

HEALTH_CATEGORY = "HEALTH"


@health_bp.before_request
@jwt_required()
def require_login():
    pass


@health_bp.route("/readings", methods=["POST"])
def add_health_reading():
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Missing JSON"}), 400

    try:
        validated = reading_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Invalid input", "details": err.messages}), 400

    try:
        reading = HealthReading(user_id=user_id, **validated)
        db.session.add(reading)
        db.session.flush()  # assigns reading.id; reading and its alerts commit together

        anomalies = detect_health_anomalies(validated)
        alerts = create_alerts(user_id, anomalies, HEALTH_CATEGORY, health_reading=reading)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Add health reading error: {e}")
        return jsonify({"error": "Failed to add health reading"}), 500

    if anomalies:
        current_app.logger.warning(
            f"Health reading {reading.id} for user {user_id}: {len(anomalies)} anomaly(ies) detected"
        )
    broadcast_alerts(alerts)

    return jsonify({
        "reading": reading_schema.dump(reading),
        "anomalies": [a.to_dict() for a in anomalies] if anomalies else None
    }), 201


@health_bp.route("/readings", methods=["GET"])
def get_health_readings():
    user_id = int(get_jwt_identity())
    limit = request.args.get("limit", current_app.config["READINGS_DEFAULT_LIMIT"], type=int)
    limit = max(1, min(limit, 1000))

    readings = (
        HealthReading.query.filter_by(user_id=user_id)
        .order_by(HealthReading.timestamp.desc(), HealthReading.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"readings": readings_schema.dump(readings)})


@health_bp.route("/vitals", methods=["GET"])
def get_latest_vitals():
    user_id = int(get_jwt_identity())
    latest = (
        HealthReading.query.filter_by(user_id=user_id)
        .order_by(HealthReading.timestamp.desc(), HealthReading.id.desc())
        .first()
    )
    if not latest:
        return jsonify({"error": "No health readings found"}), 404
    return jsonify({"vitals": reading_schema.dump(latest)})


@health_bp.route("/history", methods=["GET"])
def get_health_history():
    """Readings from the last `hours` hours, oldest first for charting."""
    user_id = int(get_jwt_identity())
    hours = request.args.get("hours", current_app.config["HISTORY_DEFAULT_HOURS"], type=float)
    max_hours = current_app.config["HISTORY_MAX_HOURS"]
    if not math.isfinite(hours) or hours <= 0 or hours > max_hours:
        return jsonify({"error": f"hours must be a positive number no greater than {max_hours}"}), 400

    since = datetime.utcnow() - timedelta(hours=hours)
    readings = (
        HealthReading.query.filter(
            HealthReading.user_id == user_id,
            HealthReading.timestamp >= since
        )
        .order_by(HealthReading.timestamp.asc(), HealthReading.id.asc())
        .all()
    )
    return jsonify({"readings": readings_schema.dump(readings)})
