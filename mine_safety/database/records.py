"""Helpers for turning MongoDB documents into JSON-friendly records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

# Fields a client may never set directly
PROTECTED_FIELDS = ("_id", "id", "created_at", "updated_at", "created_by")


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_object_id(raw: str) -> Optional[ObjectId]:
    """Parse a path id; ``None`` for anything that is not a valid ObjectId."""
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError):
        return None


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy ``doc`` with ``_id`` exposed as the string field ``id``."""
    record = {k: v for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        record["id"] = str(doc["_id"])
    for key, value in record.items():
        if isinstance(value, ObjectId):
            record[key] = str(value)
    return record


def clean_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop server-managed fields from client input."""
    return {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}


def find_unsafe_key(value: Any) -> Optional[str]:
    """
    Return the first key MongoDB would reject or read as an operator.

    Keys starting with ``$`` or containing NUL are refused at any depth.
    """
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str) or key.startswith("$") or "\x00" in key:
                return str(key)
            nested = find_unsafe_key(item)
            if nested is not None:
                return nested
    elif isinstance(value, list):
        for item in value:
            nested = find_unsafe_key(item)
            if nested is not None:
                return nested
    return None
