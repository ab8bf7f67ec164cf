import logging

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


def handle_http_error(exc: HTTPException):
    """Render 4xx/5xx raised via ``abort`` as JSON for API callers."""
    if not request.path.startswith("/api"):
        return exc
    response = jsonify({"success": False, "message": exc.description})
    response.status_code = exc.code
    return response


def handle_unexpected_error(exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    show_details = current_app.config.get("NODE_ENV") == "development"
    response = jsonify(
        {
            "success": False,
            "message": "Internal Server Error",
            "error": str(exc) if show_details else {},
        }
    )
    response.status_code = 500
    return response


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
