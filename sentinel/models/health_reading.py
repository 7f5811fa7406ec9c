from datetime import datetime
from sentinel.extensions import db


class HealthReading(db.Model):
    __tablename__ = "health_readings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    heart_rate = db.Column(db.Float, nullable=False)        # bpm
    spo2 = db.Column(db.Float, nullable=False)              # oxygen saturation %
    systolic_bp = db.Column(db.Float, nullable=False)       # mmHg
    diastolic_bp = db.Column(db.Float, nullable=False)      # mmHg
    skin_temp = db.Column(db.Float, nullable=False)         # °C
    respiratory_rate = db.Column(db.Float, nullable=True)   # breaths/min
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="health_readings")
    alerts = db.relationship("Alert", back_populates="health_reading", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_health_readings_user_id", "user_id"),
        db.Index("idx_health_readings_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self):
        return f"<HealthReading {self.id}: user={self.user_id} hr={self.heart_rate}>"
