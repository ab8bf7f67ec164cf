"""Authentication routes — register, login, logout, current user."""

from flask import Blueprint, jsonify, session

from mine_safety.auth import (
    UserExistsError,
    authenticate,
    create_user,
    get_current_profile,
    get_user,
    login_required,
)
from mine_safety.core.audit import log_audit_event
from mine_safety.core.forms import request_payload

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request_payload() or {}
    username = str(data.get("username", "")).strip()
    password = str(data.get("password", ""))
    role = str(data.get("role", "worker")).strip() or "worker"

    try:
        ok, msg = create_user(username, password, role)
    except UserExistsError as exc:
        return jsonify({"success": False, "message": str(exc)}), 409
    if not ok:
        return jsonify({"success": False, "message": msg}), 400

    log_audit_event(action="register", user_id=username.lower(), resource_type="system", details={"role": role})
    return jsonify({"success": True, "message": msg, "data": get_user(username)}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request_payload() or {}
    username = str(data.get("username", "")).strip()
    password = str(data.get("password", ""))

    ok, msg = authenticate(username, password)
    if not ok:
        log_audit_event(
            action="failed_login",
            user_id=username.lower(),
            resource_type="system",
            status="failure",
            details={"reason": msg},
        )
        return jsonify({"success": False, "message": msg}), 401

    session.clear()
    session.permanent = True
    session["authenticated"] = True
    session["user_id"] = username.lower()

    log_audit_event(action="login", user_id=username.lower(), resource_type="system")
    return jsonify({"success": True, "data": get_user(username)})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    user_id = session.get("user_id")
    if user_id:
        log_audit_event(action="logout", user_id=user_id, resource_type="system")
    session.clear()
    return jsonify({"success": True, "message": "Logged out"})


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    profile = get_current_profile()
    if profile is None:
        session.clear()
        return jsonify({"success": False, "message": "Authentication required"}), 401
    return jsonify({"success": True, "data": profile})
