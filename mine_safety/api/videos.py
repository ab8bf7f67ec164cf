"""Training/inspection video uploads, stored on disk under ``UPLOAD_DIR``."""

import logging
import secrets
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from werkzeug.utils import secure_filename

from mine_safety.api.utils import parse_limit
from mine_safety.auth import get_current_user, login_required
from mine_safety.core.audit import log_audit_event
from mine_safety.database.connection import get_db
from mine_safety.database.records import serialize, to_object_id, utcnow_iso

logger = logging.getLogger(__name__)

videos_bp = Blueprint("videos", __name__)

ALLOWED_EXTENSIONS = {"mp4", "mov", "avi", "mkv", "webm"}
VIDEO_SUBDIR = "videos"


def _allowed(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def _video_dir() -> Path:
    path = Path(current_app.config["UPLOAD_DIR"]) / VIDEO_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


@videos_bp.route("", methods=["GET"])
def list_videos():
    limit = parse_limit(request.args.get("limit"))
    if limit is None:
        return jsonify({"success": False, "message": "limit must be a positive integer"}), 400
    cursor = get_db()["videos"].find().sort("created_at", DESCENDING).limit(limit)
    return jsonify({"success": True, "data": [serialize(doc) for doc in cursor]})


@videos_bp.route("", methods=["POST"])
@login_required
def upload_video():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return jsonify({"success": False, "message": "No file uploaded (expected field 'file')"}), 400

    original = secure_filename(upload.filename)
    if not original or not _allowed(original):
        return jsonify(
            {"success": False, "message": "Unsupported file type; allowed: " + ", ".join(sorted(ALLOWED_EXTENSIONS))}
        ), 400

    stored_name = f"{secrets.token_hex(8)}_{original}"
    target = _video_dir() / stored_name
    upload.save(target)

    user_id = get_current_user()
    doc = {
        "title": request.form.get("title") or original,
        "description": request.form.get("description", ""),
        "filename": stored_name,
        "url": f"/uploads/{VIDEO_SUBDIR}/{stored_name}",
        "content_type": upload.mimetype,
        "size": target.stat().st_size,
        "created_at": utcnow_iso(),
        "created_by": user_id,
    }
    try:
        result = get_db()["videos"].insert_one(doc)
    except PyMongoError:
        # No record will point at the file, so do not keep it
        target.unlink(missing_ok=True)
        raise
    doc["_id"] = result.inserted_id
    record = serialize(doc)

    logger.info("Stored video %s (%d bytes)", stored_name, doc["size"])
    log_audit_event(action="upload_video", user_id=user_id, resource_type="videos", resource_id=record["id"])
    return jsonify({"success": True, "data": record}), 201


@videos_bp.route("/<video_id>", methods=["GET"])
def get_video(video_id: str):
    oid = to_object_id(video_id)
    doc = get_db()["videos"].find_one({"_id": oid}) if oid else None
    if doc is None:
        return jsonify({"success": False, "message": "No such video"}), 404
    return jsonify({"success": True, "data": serialize(doc)})


@videos_bp.route("/<video_id>", methods=["DELETE"])
@login_required
def delete_video(video_id: str):
    oid = to_object_id(video_id)
    doc = get_db()["videos"].find_one_and_delete({"_id": oid}) if oid else None
    if doc is None:
        return jsonify({"success": False, "message": "No such video"}), 404

    (_video_dir() / doc["filename"]).unlink(missing_ok=True)
    log_audit_event(action="delete_video", user_id=get_current_user(), resource_type="videos", resource_id=video_id)
    return jsonify({"success": True, "message": "Deleted"})
