"""
Audit logging for sign-ins and other security-relevant events.
Outputs structured JSON logs for easy ingestion by a SIEM.
"""

import logging
import sys
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

audit_logger = logging.getLogger("mine_safety.audit")
audit_logger.setLevel(logging.INFO)

# Audit records go only to the JSON handler below
audit_logger.propagate = False

log_handler = logging.StreamHandler(sys.stdout)
formatter = jsonlogger.JsonFormatter(
    fmt="%(asctime)s %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S%z"
)
log_handler.setFormatter(formatter)
audit_logger.addHandler(log_handler)


def log_audit_event(
    action: str,
    user_id: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    status: str = "success",
) -> None:
    """
    Log a structured audit event.

    :param action: The action performed (e.g., "login", "create_incident")
    :param user_id: The user performing the action
    :param resource_type: The type of resource affected (e.g., "system", "incidents")
    :param resource_id: The specific record id, if any
    :param details: Additional context
    :param status: "success" or "failure"
    """
    event_data = {
        "event_type": "audit",
        "action": action,
        "user_id": user_id,
        "resource_type": resource_type,
        "resource_id": resource_id,
        "status": status,
        "details": details or {},
    }

    message = f"User {user_id} performed {action} on {resource_type} {resource_id or ''}"
    audit_logger.info(message, extra=event_data)
