import time

from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO


def _api_rate_limit() -> str:
    return current_app.config["RATE_LIMIT"]


socketio = SocketIO()
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[_api_rate_limit],
    strategy="moving-window",
    storage_uri="memory://",
    headers_enabled=True,
)


def create_app(test_config: dict | None = None, mongo_client=None) -> Flask:
    """Application factory — creates and configures the Flask app.

    ``test_config`` overrides settings after the environment has been read and
    skips the fail-fast environment validation.  ``mongo_client`` replaces the
    PyMongo client (tests inject ``mongomock.MongoClient``).
    """
    from mine_safety.core.config import ConfigError, rate_limit_problem, validate_env

    if test_config is None:
        validate_env()

    app = Flask(__name__)
    app.config.from_object("mine_safety.core.config.Config")
    if test_config:
        app.config.update(test_config)

    # Overrides bypass validate_env, and a bad limit would fail every /api request
    problem = rate_limit_problem(app.config["RATE_LIMIT"])
    if problem:
        raise ConfigError([problem])

    from mine_safety.core.logs import configure_logging
    from mine_safety.core.telemetry import init_telemetry

    configure_logging(app.config.get("NODE_ENV", "production"))
    init_telemetry()

    # Instrument Flask app for OpenTelemetry
    from opentelemetry.instrumentation.flask import FlaskInstrumentor

    FlaskInstrumentor().instrument_app(app)

    # Middleware pipeline, in request order
    from mine_safety.core.middleware import install_middleware

    install_middleware(app)

    from mine_safety.database.connection import init_db

    init_db(app, client=mongo_client)
    app.extensions["started_at"] = time.monotonic()

    # SocketIO handlers must be declared before init_app so every app gets them
    from mine_safety.web import sockets  # noqa: F401

    socketio.init_app(app, cors_allowed_origins=[app.config["CLIENT_URL"]])

    # Register blueprints
    from mine_safety.web.routes import register_blueprints

    register_blueprints(app)

    from mine_safety.core.errors import register_error_handlers

    register_error_handlers(app)

    return app
