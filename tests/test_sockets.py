import pytest

from mine_safety import socketio
from mine_safety.web.sockets import ROOM_MEMBERS, room_members


@pytest.fixture
def connect(app):
    clients = []

    def _connect():
        sio = socketio.test_client(app)
        assert sio.is_connected()
        clients.append(sio)
        return sio

    yield _connect
    for sio in clients:
        if sio.is_connected():
            sio.disconnect()


def _events(sio, name):
    return [packet["args"][0] for packet in sio.get_received() if packet["name"] == name]


def test_connect_registers_and_disconnect_forgets(connect):
    sio = connect()
    assert len(ROOM_MEMBERS) == 1
    sio.disconnect()
    assert ROOM_MEMBERS == {}


def test_supervisor_room_membership(connect):
    c1, c2 = connect(), connect()
    c1.emit("join-role-room", "supervisor")
    c2.emit("join-role-room", "supervisor")

    assert _events(c1, "room-joined") == [{"role": "supervisor"}]
    assert len(room_members("supervisor")) == 2

    c1.disconnect()
    remaining = room_members("supervisor")
    assert len(remaining) == 1
    assert remaining[0] in ROOM_MEMBERS


def test_connection_may_join_several_rooms(connect):
    sio = connect()
    sio.emit("join-role-room", "worker")
    sio.emit("join-role-room", "safety_officer")

    assert len(room_members("worker")) == 1
    assert len(room_members("safety_officer")) == 1

    sio.emit("leave-role-room", "worker")
    assert room_members("worker") == []
    assert len(room_members("safety_officer")) == 1


@pytest.mark.parametrize("role", ["overlord", "", 42, None])
def test_unknown_role_is_refused(connect, role):
    sio = connect()
    sio.emit("join-role-room", role)

    errors = _events(sio, "room-error")
    assert errors and errors[0]["role"] == role
    assert all(not rooms for rooms in ROOM_MEMBERS.values())


def test_new_alert_reaches_only_its_role_room(app, auth_client, connect):
    supervisor, worker = connect(), connect()
    supervisor.emit("join-role-room", "supervisor")
    worker.emit("join-role-room", "worker")
    supervisor.get_received()
    worker.get_received()

    response = auth_client.post("/api/alerts", json={"message": "Evacuate level 4", "role": "supervisor"})
    assert response.status_code == 201

    alerts = _events(supervisor, "new-alert")
    assert len(alerts) == 1
    assert alerts[0]["message"] == "Evacuate level 4"
    assert alerts[0]["id"] == response.get_json()["data"]["id"]
    assert _events(worker, "new-alert") == []


def test_alert_for_unknown_role_is_rejected(auth_client):
    response = auth_client.post("/api/alerts", json={"message": "hello", "role": "everyone"})
    assert response.status_code == 400
