"""Safety alerts, stored like any record and then pushed to the role room."""

from typing import Any, Dict, Optional

from flask import current_app

from mine_safety.api.resources import make_resource_blueprint
from mine_safety.web.sockets import notify_role


def _validate_alert(data: Dict[str, Any], partial: bool) -> Optional[str]:
    role = data.get("role")
    if role is None and partial:
        return None
    if role not in current_app.config["ROLE_ROOMS"]:
        return "role must be one of " + ", ".join(current_app.config["ROLE_ROOMS"])
    return None


def _broadcast_alert(record: Dict[str, Any]) -> None:
    notify_role(record["role"], "new-alert", record)


alerts_bp = make_resource_blueprint(
    "alerts",
    "alerts",
    required=("message", "role"),
    validate=_validate_alert,
    after_create=_broadcast_alert,
)
