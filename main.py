"""
Mine Safety Companion API — development entry point.

All application logic lives inside the ``mine_safety`` package.
Run with:  python main.py
"""

import logging
import sys

from mine_safety import create_app, socketio
from mine_safety.core.config import Config, ConfigError
from mine_safety.services.monitor import start_db_monitor

logger = logging.getLogger("mine_safety")


def build_app():
    """Create the app, exiting with status 1 on invalid configuration."""
    try:
        return create_app()
    except ConfigError as exc:
        logging.basicConfig()
        logger.critical("%s", exc)
        sys.exit(1)


def main() -> None:
    app = build_app()
    start_db_monitor(app, interval=app.config["DB_CHECK_INTERVAL"])
    logger.info("Server running on port %s", Config.PORT)
    socketio.run(app, debug=app.config["NODE_ENV"] == "development", host="0.0.0.0", port=Config.PORT, use_reloader=False)


if __name__ == "__main__":
    main()
