"""
Generic CRUD blueprints for the record-style route groups.

Each group is a MongoDB collection exposed as::

    GET    /            list (newest first, ?limit=)
    POST   /            create
    GET    /<id>        fetch one
    PATCH  /<id>        partial update
    DELETE /<id>        remove
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Optional

from flask import Blueprint, jsonify, request
from pymongo import DESCENDING, ReturnDocument

from mine_safety.api.utils import parse_limit
from mine_safety.auth import get_current_user, login_required
from mine_safety.core.audit import log_audit_event
from mine_safety.core.forms import request_payload
from mine_safety.database.connection import get_db
from mine_safety.database.records import clean_payload, find_unsafe_key, serialize, to_object_id, utcnow_iso

logger = logging.getLogger(__name__)

Validator = Callable[[Dict[str, Any], bool], Optional[str]]
AfterCreate = Callable[[Dict[str, Any]], None]

HAZARD_SEVERITIES = ("low", "medium", "high", "critical")


def _missing_fields(data: Dict[str, Any], required: Iterable[str]) -> list[str]:
    return [field for field in required if data.get(field) in (None, "")]


def _not_found(collection: str):
    return jsonify({"success": False, "message": f"No such record in {collection}"}), 404


def make_resource_blueprint(
    name: str,
    collection: str,
    required: Iterable[str] = (),
    validate: Optional[Validator] = None,
    after_create: Optional[AfterCreate] = None,
) -> Blueprint:
    """Build a blueprint serving CRUD endpoints for ``collection``."""
    required = tuple(required)
    bp = Blueprint(name, __name__)

    def _check(data: Optional[Dict[str, Any]], partial: bool):
        if data is None:
            return "Request body must be a JSON object or form"
        unsafe = find_unsafe_key(data)
        if unsafe is not None:
            return f"Invalid field name {unsafe!r}: names may not start with '$' or contain NUL"
        if not partial:
            missing = _missing_fields(data, required)
            if missing:
                return "Missing required fields: " + ", ".join(missing)
        if validate:
            return validate(data, partial)
        return None

    @bp.route("", methods=["GET"])
    def list_records():
        limit = parse_limit(request.args.get("limit"))
        if limit is None:
            return jsonify({"success": False, "message": "limit must be a positive integer"}), 400
        cursor = get_db()[collection].find().sort("created_at", DESCENDING).limit(limit)
        return jsonify({"success": True, "data": [serialize(doc) for doc in cursor]})

    @bp.route("", methods=["POST"])
    @login_required
    def create_record():
        data = request_payload()
        error = _check(data, partial=False)
        if error:
            return jsonify({"success": False, "message": error}), 400

        user_id = get_current_user()
        doc = clean_payload(data)
        doc["created_at"] = utcnow_iso()
        doc["created_by"] = user_id
        result = get_db()[collection].insert_one(doc)
        doc["_id"] = result.inserted_id
        record = serialize(doc)

        logger.info("Created %s record %s", collection, record["id"])
        log_audit_event(action=f"create_{name}", user_id=user_id, resource_type=collection, resource_id=record["id"])
        if after_create:
            after_create(record)
        return jsonify({"success": True, "data": record}), 201

    @bp.route("/<record_id>", methods=["GET"])
    def get_record(record_id: str):
        oid = to_object_id(record_id)
        doc = get_db()[collection].find_one({"_id": oid}) if oid else None
        if doc is None:
            return _not_found(collection)
        return jsonify({"success": True, "data": serialize(doc)})

    @bp.route("/<record_id>", methods=["PATCH"])
    @login_required
    def update_record(record_id: str):
        oid = to_object_id(record_id)
        if oid is None:
            return _not_found(collection)

        data = request_payload()
        error = _check(data, partial=True)
        if error:
            return jsonify({"success": False, "message": error}), 400
        changes = clean_payload(data)
        if not changes:
            return jsonify({"success": False, "message": "Nothing to update"}), 400

        changes["updated_at"] = utcnow_iso()
        doc = get_db()[collection].find_one_and_update(
            {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return _not_found(collection)
        return jsonify({"success": True, "data": serialize(doc)})

    @bp.route("/<record_id>", methods=["DELETE"])
    @login_required
    def delete_record(record_id: str):
        oid = to_object_id(record_id)
        result = get_db()[collection].delete_one({"_id": oid}) if oid else None
        if result is None or result.deleted_count == 0:
            return _not_found(collection)

        log_audit_event(
            action=f"delete_{name}", user_id=get_current_user(), resource_type=collection, resource_id=record_id
        )
        return jsonify({"success": True, "message": "Deleted"})

    return bp


def _validate_hazard(data: Dict[str, Any], partial: bool) -> Optional[str]:
    severity = data.get("severity")
    if severity is None and partial:
        return None
    if severity not in HAZARD_SEVERITIES:
        return "severity must be one of " + ", ".join(HAZARD_SEVERITIES)
    return None


checklist_bp = make_resource_blueprint("checklist", "checklists", required=("title",))
hazards_bp = make_resource_blueprint("hazards", "hazards", required=("title", "severity"), validate=_validate_hazard)
incidents_bp = make_resource_blueprint("incidents", "incidents", required=("title", "description"))
behavior_bp = make_resource_blueprint("behavior", "behavior", required=("worker", "observation"))
