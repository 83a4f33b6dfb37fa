# routes/ws_routes.py
"""Websocket push of session state, so the page can show busy/disabled states live."""
import logging

from flask import current_app
from flask_socketio import SocketIO, emit, join_room

logger = logging.getLogger(__name__)

socketio = SocketIO()


def broadcast_state(owner_id, snapshot):
    """Controller listener: forward every state change to the owner's room."""
    socketio.emit("session_state", snapshot, to=owner_id)


@socketio.on("connect")
def handle_connect():
    logger.info("WS client connected")
    emit("server_message", {"msg": "connected"})


@socketio.on("disconnect")
def handle_disconnect():
    logger.info("WS client disconnected")


@socketio.on("join")
def handle_join(data=None):
    """Subscribe to the session; replies with the current snapshot."""
    owner_id = current_app.config["OWNER_ID"]
    join_room(owner_id)
    controller = current_app.extensions["interview_sessions"].get(owner_id)
    emit("session_state", controller.snapshot())
