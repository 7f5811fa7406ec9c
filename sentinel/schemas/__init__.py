from .user import UserSchema, SignupSchema, LoginSchema
from .readings import HealthReadingSchema, SystemReadingSchema

__all__ = [
    "UserSchema", "SignupSchema", "LoginSchema",
    "HealthReadingSchema", "SystemReadingSchema",
]
