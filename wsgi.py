import eventlet

eventlet.monkey_patch()

from main import build_app  # noqa: E402
from mine_safety import socketio  # noqa: E402
from mine_safety.core.config import Config  # noqa: E402
from mine_safety.services.monitor import start_db_monitor  # noqa: E402

app = build_app()
start_db_monitor(app, interval=Config.DB_CHECK_INTERVAL)

if __name__ == "__main__":
    # This file is intended to be run by Gunicorn:
    # gunicorn --worker-class eventlet -w 1 wsgi:app
    socketio.run(app, host="0.0.0.0", port=Config.PORT)
