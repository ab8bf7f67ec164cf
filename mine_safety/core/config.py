"""Application configuration."""

import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv
from limits import parse_many

# Base directory of the mine-safety project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv()

DEFAULT_PORT = 5000
DEFAULT_CLIENT_URL = "http://localhost:5173"
DEFAULT_MONGODB_URI = "mongodb://localhost:27017/mine-safety-app"
DEFAULT_RATE_LIMIT = "100 per 15 minutes"
DEFAULT_ROLE_ROOMS = "worker,supervisor,safety_officer,admin"
NODE_ENVS = ("development", "production", "test")


class ConfigError(ValueError):
    """Raised when required settings are missing or malformed."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _node_env() -> str:
    # Error details are only exposed when development is asked for explicitly
    return os.environ.get("NODE_ENV") or "production"


def rate_limit_problem(value: str) -> str | None:
    """Describe why ``value`` is not a usable rate-limit string, or return None."""
    try:
        if parse_many(value):
            return None
    except ValueError:
        pass
    return f"RATE_LIMIT must be a rate-limit string such as {DEFAULT_RATE_LIMIT!r}, got {value!r}"


def _split_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.environ.get(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def validate_env(env=None) -> None:
    """
    Check the raw environment before the app is built.

    Raises :class:`ConfigError` listing every problem found, so a broken
    deployment fails at startup instead of on the first request.
    """
    env = os.environ if env is None else env
    problems = []

    port = env.get("PORT")
    if port is not None:
        if not port.isdigit() or not 0 < int(port) < 65536:
            problems.append(f"PORT must be an integer between 1 and 65535, got {port!r}")

    client_url = env.get("CLIENT_URL")
    if client_url is not None:
        parsed = urlparse(client_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            problems.append(f"CLIENT_URL must be an http(s) origin, got {client_url!r}")

    mongo_uri = env.get("MONGODB_URI")
    if mongo_uri is not None and not mongo_uri.startswith(("mongodb://", "mongodb+srv://")):
        problems.append("MONGODB_URI must start with mongodb:// or mongodb+srv://")

    node_env = env.get("NODE_ENV")
    if node_env is not None and node_env not in NODE_ENVS:
        problems.append(f"NODE_ENV must be one of {', '.join(NODE_ENVS)}, got {node_env!r}")

    interval = env.get("DB_CHECK_INTERVAL")
    if interval is not None and (not interval.isdigit() or int(interval) < 1):
        problems.append("DB_CHECK_INTERVAL must be a positive integer (seconds)")

    rate_limit = env.get("RATE_LIMIT")
    if rate_limit is not None:
        problem = rate_limit_problem(rate_limit)
        if problem:
            problems.append(problem)

    if env.get("ROLE_ROOMS") is not None and not env["ROLE_ROOMS"].strip(" ,"):
        problems.append("ROLE_ROOMS must list at least one role")

    if problems:
        raise ConfigError(problems)


class Config:
    SECRET_KEY = os.environ.get(
        "SECRET_KEY",
        "change-me-in-production-" + os.urandom(8).hex(),
    )

    PORT = _int_env("PORT", DEFAULT_PORT)
    NODE_ENV = _node_env()

    # Single origin shared by the CORS policy and the Socket.IO handshake.
    CLIENT_URL = os.environ.get("CLIENT_URL", DEFAULT_CLIENT_URL)

    MONGODB_URI = os.environ.get("MONGODB_URI", DEFAULT_MONGODB_URI)
    MONGO_TIMEOUT_MS = _int_env("MONGO_TIMEOUT_MS", 5000)
    DB_CHECK_INTERVAL = _int_env("DB_CHECK_INTERVAL", 30)  # seconds between readiness probes

    # Files under this directory are public at /uploads/<path>.
    UPLOAD_DIR = os.environ.get("UPLOAD_DIR", str(BASE_DIR / "uploads"))
    MAX_CONTENT_LENGTH = _int_env("MAX_UPLOAD_MB", 200) * 1024 * 1024

    RATE_LIMIT = os.environ.get("RATE_LIMIT", DEFAULT_RATE_LIMIT)

    ROLE_ROOMS = _split_env("ROLE_ROOMS", DEFAULT_ROLE_ROOMS)

    SESSION_COOKIE_SAMESITE = "Lax"
