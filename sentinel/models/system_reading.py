from datetime import datetime
from sentinel.extensions import db


class SystemReading(db.Model):
    __tablename__ = "system_readings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    cabin_co2 = db.Column(db.Float, nullable=False)                 # mmHg
    cabin_o2 = db.Column(db.Float, nullable=False)                  # %
    cabin_pressure = db.Column(db.Float, nullable=False)            # kPa
    cabin_temp = db.Column(db.Float, nullable=False)                # °C
    cabin_humidity = db.Column(db.Float, nullable=False)            # %
    power_consumption = db.Column(db.Float, nullable=False)         # W
    water_reclamation_level = db.Column(db.Float, nullable=False)   # %
    waste_management_level = db.Column(db.Float, nullable=False)    # %
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="system_readings")
    alerts = db.relationship("Alert", back_populates="system_reading", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_system_readings_user_id", "user_id"),
        db.Index("idx_system_readings_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self):
        return f"<SystemReading {self.id}: user={self.user_id} co2={self.cabin_co2}>"
