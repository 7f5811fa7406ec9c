from datetime import datetime
from sentinel.extensions import db


class Alert(db.Model):
    __tablename__ = "alerts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # exactly one triggering reading
    health_reading_id = db.Column(db.Integer, db.ForeignKey("health_readings.id"), nullable=True)
    system_reading_id = db.Column(db.Integer, db.ForeignKey("system_readings.id"), nullable=True)

    type = db.Column(
        db.String(20),
        db.CheckConstraint("type IN ('CRITICAL','WARNING','INFO')"),
        nullable=False
    )
    category = db.Column(
        db.String(20),
        db.CheckConstraint("category IN ('HEALTH','SYSTEM','ENVIRONMENT')"),
        nullable=False
    )
    anomaly_type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    recommendation = db.Column(db.Text, nullable=False)
    value = db.Column(db.Float, nullable=True)

    resolved = db.Column(db.Boolean, default=False, nullable=False)
    resolved_at = db.Column(db.DateTime, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="alerts")
    health_reading = db.relationship("HealthReading", back_populates="alerts")
    system_reading = db.relationship("SystemReading", back_populates="alerts")

    __table_args__ = (
        db.CheckConstraint(
            "(health_reading_id IS NULL) <> (system_reading_id IS NULL)",
            name="ck_alerts_single_reading",
        ),
        db.Index("idx_alerts_user_resolved", "user_id", "resolved"),
        db.Index("idx_alerts_timestamp", "timestamp"),
    )

    def resolve(self, commit=True):
        """Mark alert as resolved. Resolving twice keeps the first resolved_at."""
        if self.resolved:
            return False
        self.resolved = True
        self.resolved_at = datetime.utcnow()
        if commit:
            db.session.commit()
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'type': self.type,
            'category': self.category,
            'anomalyType': self.anomaly_type,
            'title': self.title,
            'message': self.message,
            'recommendation': self.recommendation,
            'value': self.value,
            'resolved': self.resolved,
            'resolvedAt': self.resolved_at.isoformat() if self.resolved_at else None,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'healthReadingId': self.health_reading_id,
            'systemReadingId': self.system_reading_id,
        }

    def __repr__(self):
        return f'<Alert {self.id}: {self.type} {self.anomaly_type} resolved={self.resolved}>'
