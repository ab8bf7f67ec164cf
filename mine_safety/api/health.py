import time

from flask import Blueprint, current_app, jsonify

from mine_safety.database.connection import check_db_status, db_status, get_db

health_bp = Blueprint("health", __name__)


@health_bp.route("", methods=["GET"])
def health():
    """Liveness plus the last known database state; never touches the network."""
    uptime = time.monotonic() - current_app.extensions["started_at"]
    return jsonify(
        {
            "success": True,
            "status": "ok",
            "database": dict(db_status),
            "uptime_seconds": round(uptime, 3),
        }
    )


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness: 200 only if MongoDB answers a ping right now."""
    connected = check_db_status(get_db())
    body = {"success": connected, "status": "ready" if connected else "unavailable", "database": dict(db_status)}
    return jsonify(body), 200 if connected else 503
