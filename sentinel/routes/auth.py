from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    jwt_required,
    get_jwt_identity,
    get_csrf_token,
    current_user,
    set_access_cookies,
    unset_jwt_cookies
)
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from sentinel.extensions import db, limiter
from sentinel.models.user import User
from sentinel.models.audit_log import AuditLog
from sentinel.schemas.user import UserSchema, SignupSchema, LoginSchema
from sentinel.utils.decorators import roles_required

auth_bp = Blueprint("auth", __name__)
user_schema = UserSchema()
signup_schema = SignupSchema()
login_schema = LoginSchema()


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "role": user.role},
    )


def auth_response(user, token):
    """
    Body carries the token for header clients and the CSRF token that cookie
    clients echo back in X-CSRF-TOKEN on state-changing requests.
    """
    response = jsonify({
        "user": user_schema.dump(user),
        "token": token,
        "csrfToken": get_csrf_token(token),
    })
    set_access_cookies(response, token)
    return response


def login_rate_limit():
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per 15 minutes")


@auth_bp.route("/signup", methods=["POST"])
def signup():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Missing JSON"}), 400

    try:
        validated = signup_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Invalid input", "details": err.messages}), 400

    if User.query.filter_by(email=validated["email"]).first():
        return jsonify({"error": "User already exists"}), 400

    user = User(email=validated["email"], name=validated["name"], role=validated["role"])
    user.set_password(validated["password"])

    try:
        db.session.add(user)
        db.session.flush()  # assigns user.id
        AuditLog.record(user.id, "USER_SIGNUP", f"User {user.email} signed up", request.remote_addr)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Signup error: {e}")
        return jsonify({"error": "Signup failed"}), 500

    current_app.logger.info(f"New user signed up: {user.email} ({user.role})")
    return auth_response(user, issue_token(user)), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(login_rate_limit)
def login():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Missing JSON"}), 400

    try:
        credentials = login_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Invalid input", "details": err.messages}), 400

    user = User.query.filter_by(email=credentials["email"]).first()
    if not user or not user.check_password(credentials["password"]):
        current_app.logger.warning(f"Login failed for {credentials['email']}")
        return jsonify({"error": "Invalid credentials"}), 401

    AuditLog.record(user.id, "USER_LOGIN", f"User {user.email} logged in", request.remote_addr)
    db.session.commit()
    current_app.logger.info(f"Login successful for user {user.email}")

    return auth_response(user, issue_token(user)), 200


@auth_bp.route("/logout", methods=["POST"])
@jwt_required(optional=True)
def logout():
    identity = get_jwt_identity()
    if identity:
        AuditLog.record(int(identity), "USER_LOGOUT", None, request.remote_addr)
        db.session.commit()

    response = jsonify({"message": "Logged out successfully"})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify({"user": user_schema.dump(current_user)}), 200


@auth_bp.route("/audit-logs", methods=["GET"])
@roles_required("admin")
def get_audit_logs():
    limit = request.args.get("limit", 100, type=int)
    limit = max(1, min(limit, 1000))

    logs = AuditLog.query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify({"logs": [log.to_dict() for log in logs]}), 200
