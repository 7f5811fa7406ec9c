from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, current_user
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from sentinel.extensions import db
from sentinel.models.alert import Alert
from sentinel.models.audit_log import AuditLog
from sentinel.models.system_reading import SystemReading
from sentinel.schemas.readings import SystemReadingSchema
from sentinel.utils.alerts import create_alerts, broadcast_alerts
from sentinel.utils.anomaly_detection import detect_system_anomalies

system_bp = Blueprint("system", __name__)
reading_schema = SystemReadingSchema()
readings_schema = SystemReadingSchema(many=True)

SYSTEM_CATEGORY = "SYSTEM"


@system_bp.before_request
@jwt_required()
def require_login():
    pass


def _limit_arg(default):
    limit = request.args.get("limit", default, type=int)
    return max(1, min(limit, 1000))


# ------------------------------
# System readings
# ------------------------------
@system_bp.route("/readings", methods=["POST"])
def add_system_reading():
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Missing JSON"}), 400

    try:
        validated = reading_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Invalid input", "details": err.messages}), 400

    try:
        reading = SystemReading(user_id=user_id, **validated)
        db.session.add(reading)
        db.session.flush()  # assigns reading.id; reading and its alerts commit together

        anomalies = detect_system_anomalies(validated)
        alerts = create_alerts(user_id, anomalies, SYSTEM_CATEGORY, system_reading=reading)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Add system reading error: {e}")
        return jsonify({"error": "Failed to add system reading"}), 500

    if anomalies:
        current_app.logger.warning(
            f"System reading {reading.id} for user {user_id}: {len(anomalies)} anomaly(ies) detected"
        )
    broadcast_alerts(alerts)

    return jsonify({
        "reading": reading_schema.dump(reading),
        "anomalies": [a.to_dict() for a in anomalies] if anomalies else None
    }), 201


@system_bp.route("/readings", methods=["GET"])
def get_system_readings():
    user_id = int(get_jwt_identity())
    limit = _limit_arg(current_app.config["READINGS_DEFAULT_LIMIT"])

    readings = (
        SystemReading.query.filter_by(user_id=user_id)
        .order_by(SystemReading.timestamp.desc(), SystemReading.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"readings": readings_schema.dump(readings)})


@system_bp.route("/status", methods=["GET"])
def get_system_status():
    user_id = int(get_jwt_identity())
    latest = (
        SystemReading.query.filter_by(user_id=user_id)
        .order_by(SystemReading.timestamp.desc(), SystemReading.id.desc())
        .first()
    )
    if not latest:
        return jsonify({"error": "No system readings found"}), 404
    return jsonify({"status": reading_schema.dump(latest)})


# ------------------------------
# Alerts
# ------------------------------
@system_bp.route("/alerts", methods=["GET"])
def get_active_alerts():
    user_id = int(get_jwt_identity())
    alerts = (
        Alert.query.filter_by(user_id=user_id, resolved=False)
        .order_by(Alert.timestamp.desc(), Alert.id.desc())
        .all()
    )
    return jsonify({"alerts": [a.to_dict() for a in alerts]})


@system_bp.route("/alerts/all", methods=["GET"])
def get_all_alerts():
    user_id = int(get_jwt_identity())
    limit = _limit_arg(current_app.config["ALERTS_DEFAULT_LIMIT"])

    alerts = (
        Alert.query.filter_by(user_id=user_id)
        .order_by(Alert.timestamp.desc(), Alert.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"alerts": [a.to_dict() for a in alerts]})


@system_bp.route("/alerts/<int:alert_id>/resolve", methods=["PATCH"])
def resolve_alert(alert_id):
    user = current_user
    alert = db.session.get(Alert, alert_id)
    if not alert:
        return jsonify({"error": "Alert not found"}), 404

    if alert.user_id != user.id and not user.can_manage_alerts:
        return jsonify({"error": "Access denied"}), 403

    try:
        if alert.resolve(commit=False):
            AuditLog.record(user.id, "ALERT_RESOLVED", f"Alert {alert.id} ({alert.anomaly_type}) resolved", request.remote_addr)
            db.session.commit()
            current_app.logger.info(f"Alert {alert.id} resolved by user {user.id}")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Resolve alert error: {e}")
        return jsonify({"error": "Failed to resolve alert"}), 500

    return jsonify({"alert": alert.to_dict()})
