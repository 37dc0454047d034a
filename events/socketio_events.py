# socketio_events.py

import logging
from datetime import datetime

from flask_socketio import SocketIO, emit, join_room, leave_room

from utils.realtime import NOTIFICATIONS_NAMESPACE, branch_room, user_room

logger = logging.getLogger(__name__)


def register_socketio_events(socketio: SocketIO):
    """
    Room management for push clients. Payment events are published to
    `user_<id>` (user screens) and `branch_<id>` (branch dashboards).
    """

    @socketio.on("connect")
    def handle_connect():
        logger.info("Client connected to WebSocket")
        emit("server_hello", {"ts": datetime.utcnow().isoformat() + "Z"})

    @socketio.on("disconnect")
    def handle_disconnect():
        logger.info("Client disconnected from WebSocket")

    @socketio.on("join_user")
    def handle_join_user(data):
        """
        Example client emit:
            socket.emit("join_user", { user_id: 12 });

        The user_id is taken from the client as-is and membership is not
        authorized here, so any connected client can join any `user_<id>`
        room. Deployments must authenticate the socket at the connection
        layer (token check in `connect` or a gateway in front) and only let
        a client join its own room.
        """
        user_id = (data or {}).get("user_id")
        if not user_id:
            logger.warning("join_user called without user_id")
            emit("join_error", {"message": "user_id required"})
            return
        join_room(user_room(user_id))
        logger.info("User %s joined %s", user_id, user_room(user_id))
        emit("user_joined", {"user_id": user_id, "room": user_room(user_id)})

    @socketio.on("leave_user")
    def handle_leave_user(data):
        user_id = (data or {}).get("user_id")
        if user_id:
            leave_room(user_room(user_id))

    @socketio.on("join_branch")
    def handle_join_branch(data):
        branch_id = (data or {}).get("branch_id")
        if not branch_id:
            logger.warning("join_branch called without branch_id")
            emit("join_error", {"message": "branch_id required"})
            return
        join_room(branch_room(branch_id))
        emit("branch_joined", {"branch_id": branch_id, "room": branch_room(branch_id)})

    @socketio.on("join_user", namespace=NOTIFICATIONS_NAMESPACE)
    def handle_join_notifications(data):
        user_id = (data or {}).get("user_id")
        if user_id:
            join_room(user_room(user_id), namespace=NOTIFICATIONS_NAMESPACE)
            emit("user_joined", {"user_id": user_id, "room": user_room(user_id)})
