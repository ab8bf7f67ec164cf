import logging

_configured = False


def configure_logging(node_env: str = "development") -> None:
    """Send application logs to stderr; verbose while developing."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=logging.DEBUG if node_env == "development" else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # engineio/socketio are chatty at DEBUG
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    _configured = True
