from datetime import datetime
from models.db import db
from models.enums import PaymentMethod, PaymentStatus

class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    # one payment per booking
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False, unique=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False, default=PaymentMethod.GATEWAY.value)
    # payment_method values: gateway, cash, transfer, credit_card, e-wallet

    status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PENDING.value)
    # status values: pending, paid, dp_paid, failed, refunded

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    expires_date = db.Column(db.DateTime, nullable=True)
    transaction_id = db.Column(db.String(255), nullable=True, unique=True)
    payment_url = db.Column(db.String(512), nullable=True)

    booking = db.relationship("Booking", back_populates="payment")
