from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from sentinel.extensions import db

USERS_TABLE = "users"
ROLES = ("user", "admin", "mission_control")


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(150), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('user','admin','mission_control')"),
        nullable=False,
        default="user",
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    health_readings = db.relationship("HealthReading", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")
    system_readings = db.relationship("SystemReading", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")
    alerts = db.relationship("Alert", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")
    audit_logs = db.relationship("AuditLog", back_populates="user", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_users_email", "email"),
        db.Index("idx_users_role", "role"),
    )

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def can_manage_alerts(self):
        return self.role in ("admin", "mission_control")

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
