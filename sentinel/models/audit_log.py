from datetime import datetime
from sentinel.extensions import db


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    user = db.relationship("User", back_populates="audit_logs")

    @classmethod
    def record(cls, user_id, action, details=None, ip_address=None):
        """Add an audit entry to the session. The caller commits."""
        entry = cls(user_id=user_id, action=action, details=details, ip_address=ip_address)
        db.session.add(entry)
        return entry

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'userEmail': self.user.email if self.user else None,
            'action': self.action,
            'details': self.details,
            'ipAddress': self.ip_address,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }

    def __repr__(self):
        return f'<AuditLog {self.id}: {self.user_id} - {self.action}>'
