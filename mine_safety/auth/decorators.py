from functools import wraps

from flask import jsonify, session


def login_required(f):
    """Decorator that rejects anonymous callers with a 401."""

    @wraps(f)
    def decorated(*args, **kwargs):
        if not session.get("authenticated") or not session.get("user_id"):
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated
