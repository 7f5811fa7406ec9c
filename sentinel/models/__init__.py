from .user import User
from .health_reading import HealthReading
from .system_reading import SystemReading
from .alert import Alert
from .audit_log import AuditLog

__all__ = [
    "User",
    "HealthReading", "SystemReading",
    "Alert", "AuditLog",
]
