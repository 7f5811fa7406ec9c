import logging

from sentinel.extensions import db, socketio
from sentinel.models.alert import Alert
from sentinel.sockets import OPERATORS_ROOM, user_room
from sentinel.utils.anomaly_detection import generate_recommendation

logger = logging.getLogger(__name__)


def create_alerts(user_id, anomalies, default_category, health_reading=None, system_reading=None):
    """
    Add one Alert per anomaly to the session, in anomaly order.
    Exactly one of health_reading / system_reading must be given. The caller commits.
    """
    if (health_reading is None) == (system_reading is None):
        raise ValueError("An alert needs exactly one triggering reading")

    alerts = []
    for anomaly in anomalies:
        alert = Alert(
            user_id=user_id,
            health_reading=health_reading,
            system_reading=system_reading,
            type=anomaly.severity,
            category=anomaly.category or default_category,
            anomaly_type=anomaly.type,
            title=anomaly.title,
            message=anomaly.message,
            value=anomaly.value,
            recommendation=generate_recommendation(anomaly.type),
        )
        db.session.add(alert)
        alerts.append(alert)
    return alerts


def broadcast_alerts(alerts):
    """Push committed alerts to the owner's sockets and to operator dashboards."""
    for alert in alerts:
        socketio.emit("new_alert", alert.to_dict(), to=[user_room(alert.user_id), OPERATORS_ROOM])
    if alerts:
        logger.debug("Broadcast %d alert(s)", len(alerts))
