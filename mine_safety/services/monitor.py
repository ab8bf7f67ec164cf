"""Background thread that periodically probes the MongoDB connection."""

from __future__ import annotations

import logging
import threading
import time

from mine_safety.core.telemetry import get_meter, get_tracer
from mine_safety.database.connection import check_db_status

logger = logging.getLogger(__name__)

# OpenTelemetry Metrics
meter = get_meter()
db_ping_counter = meter.create_counter(
    "mine_safety.db.ping.count",
    description="Number of database readiness probes performed",
)
db_failure_counter = meter.create_counter(
    "mine_safety.db.ping.failures",
    description="Number of failed database readiness probes",
)
tracer = get_tracer()


def probe_once(app) -> bool:
    """Run a single readiness probe inside ``app``'s context."""
    with app.app_context(), tracer.start_as_current_span("db.readiness_probe"):
        is_up = check_db_status(app.extensions["mongo_db"])

    db_ping_counter.add(1)
    if not is_up:
        db_failure_counter.add(1)
    return is_up


def monitor_database(app, interval: int = 30) -> None:
    """
    Continuously ping MongoDB and keep ``db_status`` current.

    Failures are logged, never raised: the API keeps serving while the
    database is down and data routes fail at the point of use.
    """
    while True:
        try:
            probe_once(app)
        except Exception:
            logger.error("Error in monitor_database", exc_info=True)
        time.sleep(interval)


def start_db_monitor(app, interval: int = 30) -> threading.Thread:
    """Spawn the monitoring daemon thread and return it."""
    t = threading.Thread(
        target=monitor_database,
        args=(app, interval),
        daemon=True,
    )
    t.start()
    return t
