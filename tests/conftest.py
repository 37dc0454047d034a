from datetime import date, time
from decimal import Decimal

import pytest

from app import create_app
from config import Config
from models import db
from models.booking import Booking
from models.branch import Branch
from models.field import Field, FieldType
from models.payment import Payment
from models.user import User
from utils.realtime import user_room


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    MIDTRANS_SERVER_KEY = None
    SOCKETIO_MESSAGE_QUEUE = None
    LOG_LEVEL = "WARNING"


class RecordingPush:
    """Stands in for PushChannel and remembers every emit."""

    def __init__(self):
        self.events = []

    def emit_to_room(self, room, event, payload, namespace=None):
        self.events.append({"room": room, "event": event, "payload": payload, "namespace": namespace})
        return True

    def emit_to_user(self, user_id, event, payload, namespace=None):
        return self.emit_to_room(user_room(user_id), event, payload, namespace=namespace)

    def names(self):
        return [e["event"] for e in self.events]

    def named(self, event):
        return [e for e in self.events if e["event"] == event]


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def push(app):
    recorder = RecordingPush()
    app.extensions["payment_reconciler"].push = recorder
    return recorder


@pytest.fixture
def reconciler(app, push):
    return app.extensions["payment_reconciler"]


@pytest.fixture
def booking_graph(app):
    """User 3 booked field 'Lapangan A' (night price 150000); payment 7 is pending."""
    owner = User(id=1, email="owner@example.com", name="Owner", role="owner_cabang")
    player = User(id=3, email="player@example.com", name="Player", role="user")
    db.session.add_all([owner, player])

    branch = Branch(id=2, name="Cabang Utama", location="Jakarta", owner_id=1)
    futsal = FieldType(id=1, name="Futsal")
    db.session.add_all([branch, futsal])

    field = Field(
        id=5, branch_id=2, type_id=1, name="Lapangan A",
        price_day=Decimal("100000.00"), price_night=Decimal("150000.00"),
        status="available",
    )
    db.session.add(field)

    booking = Booking(
        id=11, user_id=3, field_id=5, booking_date=date(2026, 11, 2),
        start_time=time(19, 0), end_time=time(20, 0), status="active",
    )
    db.session.add(booking)

    payment = Payment(
        id=7, booking_id=11, user_id=3, amount=Decimal("150000.00"),
        payment_method="gateway", status="pending",
    )
    db.session.add(payment)
    db.session.commit()

    return {"user_id": 3, "branch_id": 2, "field_id": 5, "booking_id": 11, "payment_id": 7}


@pytest.fixture
def fetch(app):
    def _fetch(model, pk):
        db.session.expire_all()
        return db.session.get(model, pk)
    return _fetch


@pytest.fixture
def notification_body():
    def _body(**overrides):
        body = {
            "order_id": "PAY-7",
            "transaction_status": "settlement",
            "fraud_status": "accept",
            "gross_amount": "150000.00",
            "payment_type": "bank_transfer",
            "status_code": "200",
            "transaction_id": "9aed5972-5b6a-401e-894b-a32c91ed1a3a",
        }
        body.update(overrides)
        return {k: v for k, v in body.items() if v is not None}
    return _body
