from typing import Optional

DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 500


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """``?limit=`` value clamped to ``MAX_LIST_LIMIT``; ``None`` if malformed."""
    if raw is None or raw == "":
        return DEFAULT_LIST_LIMIT
    if not raw.isdigit() or int(raw) < 1:
        return None
    return min(int(raw), MAX_LIST_LIMIT)
