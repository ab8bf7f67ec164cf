"""Request body helpers, including extended URL-encoded parsing (``a[b]=1`` → ``{"a": {"b": "1"}}``)."""

import re
from typing import Any, Dict, Optional

from flask import g, request
from werkzeug.datastructures import MultiDict

_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    head, bracket, rest = key.partition("[")
    if not bracket or not key.endswith("]"):
        return [key]
    segments = _SEGMENT_RE.findall(bracket + rest)
    # Reject keys like "a[b]junk[c]" that the pattern only partially matches
    if "".join(f"[{s}]" for s in segments) != bracket + rest:
        return [key]
    return [head, *segments]


def _assign(target: dict, parts: list[str], values: list[str]) -> None:
    key = parts[0]
    if len(parts) == 1:
        target[key] = values if len(values) > 1 else values[0]
        return

    # "tags[]" appends to a list
    if len(parts) == 2 and parts[1] == "":
        existing = target.get(key)
        if not isinstance(existing, list):
            existing = []
        existing.extend(values)
        target[key] = existing
        return

    child = target.get(key)
    if not isinstance(child, dict):
        child = {}
        target[key] = child
    _assign(child, parts[1:], values)


def parse_nested_form(form: MultiDict) -> dict:
    """
    Turn a flat form into nested dicts/lists.

    Repeated plain keys become lists, ``key[]`` always yields a list and
    ``key[sub]`` nests to any depth.
    """
    result: dict = {}
    for key, values in form.lists():
        if not values:
            continue
        _assign(result, _split_key(key), values)
    return result


def request_payload() -> Optional[Dict[str, Any]]:
    """
    Return the request body as a dict.

    JSON bodies are used as-is, URL-encoded forms come pre-parsed into
    nested dicts.  Returns ``None`` when the body is not an object.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else None
    if g.get("form"):
        return dict(g.form)
    if request.form:
        return request.form.to_dict()
    return None
