from datetime import date, datetime, time
from decimal import Decimal

from models.enums import PaymentStatus
from services.payment_reconciliation import PaymentReconciler
from utils.realtime import PushChannel, branch_room, to_jsonable, user_room


class RecordingSocketIO:
    def __init__(self):
        self.calls = []

    def emit(self, event, data, **kwargs):
        self.calls.append((event, data, kwargs))


class LegacySocketIO(RecordingSocketIO):
    """Older Flask-SocketIO releases only understand room=."""

    def emit(self, event, data, **kwargs):
        if "to" in kwargs:
            raise TypeError("emit() got an unexpected keyword argument 'to'")
        super().emit(event, data, **kwargs)


class BrokenSocketIO:
    def emit(self, *args, **kwargs):
        raise ConnectionError("message queue unreachable")


def test_room_names():
    assert user_room(3) == "user_3"
    assert branch_room(2) == "branch_2"


def test_to_jsonable():
    payload = {
        "status": PaymentStatus.DP_PAID,
        "amount": Decimal("75000.50"),
        "date": date(2026, 11, 2),
        "at": datetime(2026, 11, 2, 19, 0),
        "start": time(19, 0),
        "ids": (1, 2),
        "nested": {"none": None, "flag": True},
    }

    assert to_jsonable(payload) == {
        "status": "dp_paid",
        "amount": 75000.5,
        "date": "2026-11-02",
        "at": "2026-11-02T19:00:00Z",
        "start": "19:00:00",
        "ids": [1, 2],
        "nested": {"none": None, "flag": True},
    }


def test_emit_to_user_uses_user_room():
    sio = RecordingSocketIO()

    assert PushChannel(sio).emit_to_user(3, "payment_update", {"status": PaymentStatus.PAID}) is True
    assert sio.calls == [("payment_update", {"status": "paid"}, {"to": "user_3"})]


def test_emit_with_namespace():
    sio = RecordingSocketIO()

    PushChannel(sio).emit_to_room("user_3", "new_notification", {}, namespace="/notifications")

    assert sio.calls[0][2] == {"to": "user_3", "namespace": "/notifications"}


def test_emit_falls_back_to_room_keyword():
    sio = LegacySocketIO()

    assert PushChannel(sio).emit_to_room("branch_2", "payment_status_changed", {"paymentId": 7}) is True
    assert sio.calls == [("payment_status_changed", {"paymentId": 7}, {"room": "branch_2"})]


def test_emit_failures_are_swallowed():
    assert PushChannel(BrokenSocketIO()).emit_to_user(3, "payment_update", {}) is False
    assert PushChannel(None).emit_to_user(3, "payment_update", {}) is False


def test_socket_client_joins_user_room(app):
    socketio = app.extensions["socketio"]
    client = socketio.test_client(app)

    received = client.get_received()
    assert any(msg["name"] == "server_hello" for msg in received)

    client.emit("join_user", {"user_id": 3})
    joined = [msg for msg in client.get_received() if msg["name"] == "user_joined"]
    assert joined[0]["args"][0] == {"user_id": 3, "room": "user_3"}

    client.disconnect()


def test_join_user_requires_user_id(app):
    socketio = app.extensions["socketio"]
    client = socketio.test_client(app)
    client.get_received()

    client.emit("join_user", {})
    errors = [msg for msg in client.get_received() if msg["name"] == "join_error"]
    assert errors[0]["args"][0] == {"message": "user_id required"}

    client.disconnect()


def test_reconciliation_reaches_joined_socket_client(app, booking_graph, notification_body):
    socketio = app.extensions["socketio"]
    client = socketio.test_client(app)
    client.emit("join_user", {"user_id": 3})
    client.get_received()

    PaymentReconciler(push=PushChannel(socketio)).reconcile(notification_body())

    received = {msg["name"]: msg["args"][0] for msg in client.get_received()}
    assert received["payment_update"]["status"] == "paid"
    assert received["booking_confirmed"]["bookingDate"] == "2026-11-02"

    client.disconnect()
