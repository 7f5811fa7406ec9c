from datetime import datetime

from flask import Blueprint, jsonify

home_bp = Blueprint("home", __name__)


@home_bp.route("/api/ping", methods=["GET"])
def ping():
    return jsonify({
        "message": "Sentinel API is running",
        "timestamp": datetime.utcnow().isoformat()
    })
