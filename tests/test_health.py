import pytest
from pymongo.errors import ServerSelectionTimeoutError

from mine_safety.database import connection
from mine_safety.database.connection import database_name, db_status
from mine_safety.services.monitor import probe_once


@pytest.fixture
def database_down(monkeypatch):
    def _ping(db):
        raise ServerSelectionTimeoutError("10.255.255.1:27017: timed out")

    monkeypatch.setattr(connection, "ping_database", _ping)


@pytest.fixture
def database_up(monkeypatch):
    monkeypatch.setattr(connection, "ping_database", lambda db: None)


def test_health_reports_last_known_status(client):
    body = client.get("/api/health").get_json()
    assert body["success"] is True
    assert body["status"] == "ok"
    assert body["database"]["connected"] is False
    assert body["uptime_seconds"] >= 0


def test_ready_is_503_when_database_is_down(client, database_down):
    response = client.get("/api/health/ready")
    assert response.status_code == 503
    assert response.get_json()["database"]["error"].endswith("timed out")


def test_ready_is_200_when_database_answers(client, database_up):
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ready"


def test_probe_tracks_transitions(app, monkeypatch):
    monkeypatch.setattr(connection, "ping_database", lambda db: None)
    assert probe_once(app) is True
    assert db_status["connected"] is True
    assert db_status["checked_at"] is not None

    def _down(db):
        raise ServerSelectionTimeoutError("gone")

    monkeypatch.setattr(connection, "ping_database", _down)
    assert probe_once(app) is False
    assert db_status == {"connected": False, "checked_at": db_status["checked_at"], "error": "gone"}


@pytest.mark.parametrize(
    ("uri", "name"),
    [
        ("mongodb://localhost:27017/mine-safety-app", "mine-safety-app"),
        ("mongodb://user:pw@h1:27017,h2:27017/site42?replicaSet=rs0", "site42"),
        ("mongodb://localhost:27017", "mine-safety-app"),
    ],
)
def test_database_name_from_uri(uri, name):
    assert database_name(uri) == name
