import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from sentinel.config import config
from sentinel.extensions import db, ma, jwt, migrate, socketio, limiter
from sentinel.models import User
from sentinel.utils.log_config import configure_logging


def create_app(config_name=None):
    app = Flask(__name__)

    # Settings
    config_name = config_name or os.getenv("SENTINEL_CONFIG", "default")
    app.config.from_object(config[config_name])
    configure_logging(app)

    # Extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app, supports_credentials=True, resources={r"/api/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "Authorization", "X-CSRF-TOKEN"],
        "methods": ["GET", "POST", "PATCH", "OPTIONS"]
    }})
    socketio.init_app(app, async_mode=app.config["SOCKETIO_ASYNC_MODE"])

    register_jwt_callbacks()
    register_error_handlers(app)

    # Socket.IO connect handler
    from sentinel import sockets  # noqa: F401

    # Blueprints
    from sentinel.routes.home import home_bp
    from sentinel.routes.auth import auth_bp
    from sentinel.routes.health import health_bp
    from sentinel.routes.system import system_bp

    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(health_bp, url_prefix="/api/health")
    app.register_blueprint(system_bp, url_prefix="/api/system")

    from sentinel.commands import register_commands
    register_commands(app)

    app.logger.info(f"Sentinel API configured ({config_name})")
    return app


def register_jwt_callbacks():
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error": "Token expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"error": "Invalid token"}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(error):
        return jsonify({"error": "Authentication required"}), 401

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(jwt_header, jwt_payload):
        return jsonify({"error": "User not found"}), 404


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e):
        app.logger.exception(f"Unhandled error: {e}")
        db.session.rollback()
        return jsonify({"error": "Internal Server Error"}), 500


# JWT callback
@jwt.user_lookup_loader
def user_lookup_callback(_jwt_header, jwt_data):
    identity = jwt_data["sub"]
    return db.session.get(User, int(identity))
