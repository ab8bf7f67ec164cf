"""SocketIO event handlers for role-based alert rooms."""

import logging

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from mine_safety import socketio

logger = logging.getLogger(__name__)

# Rooms joined by each live connection: {sid: {role, ...}}
ROOM_MEMBERS: dict[str, set[str]] = {}


def room_members(role: str) -> list[str]:
    """Session ids currently joined to ``role``."""
    return sorted(sid for sid, rooms in ROOM_MEMBERS.items() if role in rooms)


def notify_role(role: str, event: str, payload) -> None:
    """Push ``event`` to every connection in the ``role`` room."""
    logger.debug("Emitting %s to room %s (%d members)", event, role, len(room_members(role)))
    socketio.emit(event, payload, to=role)


@socketio.on("connect")
def handle_connect():
    ROOM_MEMBERS[request.sid] = set()
    logger.info("A user connected: %s", request.sid)


@socketio.on("disconnect")
def handle_disconnect(reason=None):
    ROOM_MEMBERS.pop(request.sid, None)
    logger.info("User disconnected: %s", request.sid)


@socketio.on("join-role-room")
def handle_join_role_room(role):
    allowed = current_app.config["ROLE_ROOMS"]
    if not isinstance(role, str) or role not in allowed:
        logger.warning("Connection %s asked for unknown room %r", request.sid, role)
        emit("room-error", {"role": role, "message": "Unknown role room"})
        return

    join_room(role)
    ROOM_MEMBERS.setdefault(request.sid, set()).add(role)
    logger.info("User %s joined room: %s", request.sid, role)
    emit("room-joined", {"role": role})


@socketio.on("leave-role-room")
def handle_leave_role_room(role):
    rooms = ROOM_MEMBERS.get(request.sid, set())
    if role not in rooms:
        return
    leave_room(role)
    rooms.discard(role)
    logger.info("User %s left room: %s", request.sid, role)
