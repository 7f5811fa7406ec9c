# sentinel/utils/decorators.py
from functools import wraps
from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request


def roles_required(*roles):
    """
    Restrict a view to the given roles.
    Requires a valid JWT; the role is read from the token claims.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get("role")
            if not role or role not in roles:
                return jsonify({"error": "Access denied"}), 403
            return view_func(*args, **kwargs)
        return wrapper
    return decorator
