from typing import Any, Dict, Optional, Tuple

from flask import session

from .users import UserManager


def authenticate(username: str, password: str) -> Tuple[bool, str]:
    """Verify a username + password.  Returns (success, message)."""
    username = username.strip().lower()
    if not username:
        return False, "Username is required."

    if UserManager.verify_password(username, password):
        return True, "OK"
    return False, "Invalid username or password."


def get_current_user() -> Optional[str]:
    """Return the logged-in username from the Flask session, or None."""
    return session.get("user_id")


def get_current_profile() -> Optional[Dict[str, Any]]:
    user_id = get_current_user()
    return UserManager.get_user(user_id) if user_id else None
