# utils/realtime.py
from __future__ import annotations
from datetime import datetime, date, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

NOTIFICATIONS_NAMESPACE = "/notifications"


def user_room(user_id) -> str:
    return f"user_{user_id}"


def branch_room(branch_id) -> str:
    return f"branch_{branch_id}"


def to_jsonable(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj

    # str-valued enums are also str; unwrap them first
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)
    if isinstance(obj, str):
        return obj

    if isinstance(obj, datetime):
        return obj.isoformat() + ("Z" if obj.tzinfo is None else "")
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, time):
        return obj.strftime("%H:%M:%S")

    if isinstance(obj, Decimal):
        return float(obj)

    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_jsonable(v) for v in obj]

    return str(obj)


class PushChannel:
    """
    Best-effort Socket.IO publisher. Emitting never raises: a failed push is
    logged and reported through the return value only.
    """

    def __init__(self, socketio: Any = None):
        self.socketio = socketio

    def emit_to_room(self, room: str, event: str, payload: Dict[str, Any], namespace: Optional[str] = None) -> bool:
        if not self.socketio:
            logger.warning("push: SocketIO unavailable; event='%s' room=%s", event, room)
            return False

        try:
            data = to_jsonable(payload)
            emit_kwargs = {"namespace": namespace} if namespace else {}

            # Try 'to=' first, fallback to 'room=' on older versions
            try:
                self.socketio.emit(event, data, to=room, **emit_kwargs)
            except TypeError:
                self.socketio.emit(event, data, room=room, **emit_kwargs)

            logger.info("push: event='%s' room=%s namespace=%s", event, room, namespace or "/")
            return True
        except Exception as exc:
            logger.exception("push failed: event='%s' room=%s error=%s", event, room, exc)
            return False

    def emit_to_user(self, user_id, event: str, payload: Dict[str, Any], namespace: Optional[str] = None) -> bool:
        return self.emit_to_room(user_room(user_id), event, payload, namespace=namespace)
