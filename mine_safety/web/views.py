"""Root liveness route and public uploads."""

from flask import Blueprint, current_app, jsonify, send_from_directory

views_bp = Blueprint("views", __name__)


@views_bp.route("/")
def index():
    return jsonify({"activeStatus": True, "error": False})


@views_bp.route("/uploads/<path:filename>")
def uploaded_file(filename: str):
    # send_from_directory refuses paths escaping UPLOAD_DIR and 404s missing files
    return send_from_directory(current_app.config["UPLOAD_DIR"], filename)
