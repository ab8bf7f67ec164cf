import mongomock
import pytest

from mine_safety import create_app, limiter
from mine_safety.database.connection import db_status
from mine_safety.web.sockets import ROOM_MEMBERS


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def make_app(upload_dir):
    def _make(**overrides):
        config = {
            "TESTING": True,
            "NODE_ENV": "test",
            "SECRET_KEY": "test-secret",
            "UPLOAD_DIR": str(upload_dir),
            "MONGODB_URI": "mongodb://localhost:27017/mine-safety-test",
        }
        config.update(overrides)
        app = create_app(config, mongo_client=mongomock.MongoClient())
        with app.app_context():
            limiter.reset()
        return app

    yield _make
    ROOM_MEMBERS.clear()
    db_status.update(connected=False, checked_at=None, error=None)


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """A test client with a logged-in supervisor session."""
    client.post("/api/auth/register", json={"username": "Dana", "password": "hardhat1", "role": "supervisor"})
    response = client.post("/api/auth/login", json={"username": "dana", "password": "hardhat1"})
    assert response.status_code == 200
    return client
