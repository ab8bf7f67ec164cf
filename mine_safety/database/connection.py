"""
MongoDB connection handling.

The client is created without connecting; the first operation (or the
readiness probe in :mod:`mine_safety.services.monitor`) opens the sockets.
Requests are therefore served even while the database is unreachable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import urlparse

from flask import Flask, current_app
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "mine-safety-app"

# Latest readiness probe result, shared with the health routes.
db_status: Dict[str, Any] = {"connected": False, "checked_at": None, "error": None}


def database_name(uri: str) -> str:
    """Database name from the URI path, falling back to the app default."""
    return urlparse(uri).path.lstrip("/") or DEFAULT_DB_NAME


def init_db(app: Flask, client=None) -> None:
    """Attach a MongoDB client and database handle to ``app.extensions``."""
    uri = app.config["MONGODB_URI"]
    if client is None:
        client = MongoClient(
            uri,
            connect=False,
            serverSelectionTimeoutMS=app.config["MONGO_TIMEOUT_MS"],
        )

    app.extensions["mongo_client"] = client
    app.extensions["mongo_db"] = client[database_name(uri)]
    logger.info("MongoDB client configured for database %r", database_name(uri))


def get_db() -> Database:
    db = current_app.extensions.get("mongo_db")
    if db is None:
        raise RuntimeError("Database not initialised — call init_db() first.")
    return db


def ping_database(db: Database) -> None:
    """Round-trip to the server; raises ``PyMongoError`` if it is unreachable."""
    db.client.admin.command("ping")


def check_db_status(db: Database) -> bool:
    """Probe the database, record the outcome in ``db_status`` and return it."""
    was_connected = db_status["connected"]
    try:
        ping_database(db)
    except PyMongoError as exc:
        db_status.update(connected=False, error=str(exc))
        if was_connected or db_status["checked_at"] is None:
            logger.error("MongoDB connection error: %s", exc)
    else:
        db_status.update(connected=True, error=None)
        if not was_connected:
            logger.info("Connected to MongoDB")

    db_status["checked_at"] = datetime.now(timezone.utc).isoformat()
    return db_status["connected"]
