import hashlib
import hmac
import os
from typing import Any, Dict, Optional, Tuple

from flask import current_app
from pymongo.errors import DuplicateKeyError

from mine_safety.database.connection import get_db
from mine_safety.database.records import serialize, utcnow_iso

MIN_PASSWORD_LENGTH = 6


class UserExistsError(ValueError):
    """Raised when registering a username that is already taken."""


def _hash_password(password: str) -> str:
    """Hash a password with PBKDF2-HMAC-SHA256 + random salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations=260_000)
    return salt.hex() + ":" + dk.hex()


def _verify_password(password: str, stored: str) -> bool:
    """Verify a password against a stored hash."""
    try:
        salt_hex, dk_hex = stored.split(":", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(dk_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations=260_000)
    return hmac.compare_digest(dk, expected)


def _public(doc: Dict[str, Any]) -> Dict[str, Any]:
    record = serialize(doc)
    record.pop("password_hash", None)
    return record


class UserManager:
    @staticmethod
    def collection():
        users = get_db()["users"]
        # Index creation needs a live server, so it waits for first use
        if not current_app.extensions.get("users_indexed"):
            users.create_index("username", unique=True)
            current_app.extensions["users_indexed"] = True
        return users

    @staticmethod
    def get_user(username: str) -> Optional[Dict[str, Any]]:
        """Return a user without its password hash."""
        doc = UserManager.collection().find_one({"username": username.strip().lower()})
        return _public(doc) if doc else None

    @staticmethod
    def create_user(username: str, password: str, role: str = "worker") -> Tuple[bool, str]:
        """Create a new user.  Raises :class:`UserExistsError` for a taken username."""
        username = username.strip().lower()
        if not username:
            return False, "Username is required."
        if len(password) < MIN_PASSWORD_LENGTH:
            return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        if role not in current_app.config["ROLE_ROOMS"]:
            return False, f'Unknown role "{role}".'

        try:
            UserManager.collection().insert_one(
                {
                    "username": username,
                    "password_hash": _hash_password(password),
                    "role": role,
                    "created_at": utcnow_iso(),
                }
            )
        except DuplicateKeyError as exc:
            raise UserExistsError(f'User "{username}" already exists.') from exc
        return True, f'User "{username}" created successfully.'

    @staticmethod
    def verify_password(username: str, password: str) -> bool:
        doc = UserManager.collection().find_one({"username": username.strip().lower()})
        if not doc:
            return False
        return _verify_password(password, doc.get("password_hash", ""))
