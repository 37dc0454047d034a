from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Tuple, Union
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from models import db
from models.booking import Booking
from models.enums import PaymentStatus
from models.notification import Notification
from models.payment import Payment
from services.errors import PaymentNotFound, PersistenceFailure
from utils.activity_log import log_activity
from utils.midtrans import (
    ORDER_ID_PREFIX,
    GatewayNotification,
    derive_field_status,
    map_payment_method,
    map_transaction_status,
    status_phrase,
)
from utils.realtime import NOTIFICATIONS_NAMESPACE, PushChannel, branch_room

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE = "PAYMENT"
CONFIRMED_STATUSES = (PaymentStatus.PAID, PaymentStatus.DP_PAID)

# payments.id is a db.Integer column (32-bit on Postgres and MySQL)
MIN_DB_ID = -(2 ** 31)
MAX_DB_ID = 2 ** 31 - 1


@dataclass(frozen=True)
class ReconciliationResult:
    payment_id: int
    booking_id: int
    previous_status: str
    status: PaymentStatus
    field_status: str
    payment_method: str


@dataclass(frozen=True)
class _Audience:
    user_id: int
    branch_id: int
    field_name: str
    booking_date: date


class PaymentReconciler:
    """
    Applies payment status transitions to a payment, its field, the user's
    notifications and the activity log as one unit, then pushes the change to
    connected clients.

    The push channel is injected so every transport (HTTP webhook, CLI replay,
    admin correction) drives the same engine.
    """

    def __init__(self, push: Optional[PushChannel] = None, session=None, order_prefix: str = ORDER_ID_PREFIX):
        self.push = push or PushChannel(None)
        self._session = session
        self.order_prefix = order_prefix

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def load_payment(self, payment_id: int) -> Payment:
        # Ids past the column range cannot exist; don't hand them to the driver.
        if not MIN_DB_ID <= payment_id <= MAX_DB_ID:
            raise PaymentNotFound(payment_id)

        payment = (
            self.session.query(Payment)
            .options(
                joinedload(Payment.booking).joinedload(Booking.field),
                joinedload(Payment.booking).joinedload(Booking.user),
            )
            .filter(Payment.id == payment_id)
            .first()
        )
        if payment is None:
            raise PaymentNotFound(payment_id)
        return payment

    def reconcile(self, notification: Union[GatewayNotification, Mapping[str, Any]]) -> ReconciliationResult:
        if not isinstance(notification, GatewayNotification):
            notification = GatewayNotification.from_payload(notification, self.order_prefix)

        payment = self.load_payment(notification.payment_id)
        field = payment.booking.field

        new_status = map_transaction_status(
            notification.transaction_status,
            notification.fraud_status,
            notification.gross_amount,
            field.full_price,
        )
        method = map_payment_method(notification.payment_type)

        logger.info(
            "Reconciling payment #%s: transaction_status=%s fraud_status=%s amount=%s -> %s",
            payment.id, notification.transaction_status, notification.fraud_status,
            notification.gross_amount, new_status.value,
        )

        details = {
            "transactionStatus": notification.transaction_status,
            "fraudStatus": notification.fraud_status,
            "amount": notification.raw_gross_amount,
            "paymentMethod": notification.payment_type,
            "transactionId": notification.transaction_id,
        }
        result, audience = self._commit_transition(
            payment,
            new_status,
            payment_method=method.value if method else None,
            transaction_id=notification.transaction_id,
            details=details,
        )
        self._publish(audience, result, details)
        return result

    def correct_status(self, payment_id: int, status, actor_id=None, note: Optional[str] = None) -> ReconciliationResult:
        """Manual status override by an administrator."""
        new_status = PaymentStatus(status)
        payment = self.load_payment(payment_id)

        details = {"correctedBy": actor_id, "note": note}
        result, audience = self._commit_transition(
            payment,
            new_status,
            details=details,
            action_suffix=" (manual correction)",
            actor_id=actor_id,
        )
        self._publish(audience, result, details)
        return result

    def _commit_transition(
        self,
        payment: Payment,
        new_status: PaymentStatus,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
        details: Optional[dict] = None,
        action_suffix: str = "",
        actor_id=None,
    ) -> Tuple[ReconciliationResult, _Audience]:
        booking = payment.booking
        field = booking.field
        payment_id = payment.id
        previous_status = payment.status
        field_status = derive_field_status(new_status, field.status)
        phrase = status_phrase(new_status)

        # Commit expires every loaded attribute, so read what the result and
        # the push need while the rows are still loaded.
        audience = _Audience(
            user_id=booking.user_id,
            branch_id=field.branch_id,
            field_name=field.name,
            booking_date=booking.booking_date,
        )
        field_id = field.id
        booking_id = booking.id
        stored_method = payment_method or payment.payment_method

        try:
            payment.status = new_status.value
            if payment_method:
                payment.payment_method = payment_method
            if transaction_id:
                payment.transaction_id = transaction_id

            field.status = field_status

            log_activity(
                f"Payment {new_status.value} for booking {booking_id}{action_suffix}",
                user_id=actor_id if actor_id is not None else audience.user_id,
                details={
                    "bookingId": booking_id,
                    "paymentId": payment_id,
                    "previousStatus": previous_status,
                    **(details or {}),
                },
                session=self.session,
            )

            self.session.add(Notification(
                user_id=audience.user_id,
                title=f"Payment {phrase}",
                message=f"Your payment for booking #{booking_id} {phrase}.",
                is_read=False,
                type=NOTIFICATION_TYPE,
                link_id=str(payment_id),
            ))

            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Rolled back payment #%s transition to %s: %s", payment_id, new_status.value, exc)
            raise PersistenceFailure(payment_id, str(exc)) from exc

        logger.info(
            "Payment #%s: %s -> %s, field #%s -> %s",
            payment_id, previous_status, new_status.value, field_id, field_status,
        )
        result = ReconciliationResult(
            payment_id=payment_id,
            booking_id=booking_id,
            previous_status=previous_status,
            status=new_status,
            field_status=field_status,
            payment_method=stored_method,
        )
        return result, audience

    def _publish(self, audience: _Audience, result: ReconciliationResult, details: dict) -> None:
        # Committed state is final at this point; push failures are only logged.
        phrase = status_phrase(result.status)

        self.push.emit_to_user(audience.user_id, "payment_update", {
            "paymentId": result.payment_id,
            "bookingId": result.booking_id,
            "status": result.status,
            "message": f"Your payment {phrase}",
            "details": {
                "transactionStatus": details.get("transactionStatus"),
                "paymentMethod": details.get("paymentMethod"),
                "amount": details.get("amount"),
            },
        })

        if result.status in CONFIRMED_STATUSES:
            self.push.emit_to_user(audience.user_id, "booking_confirmed", {
                "bookingId": result.booking_id,
                "fieldName": audience.field_name,
                "bookingDate": audience.booking_date,
                "paymentStatus": result.status,
            })

        self.push.emit_to_user(audience.user_id, "new_notification", {
            "title": f"Payment {phrase}",
            "message": f"Your payment for booking #{result.booking_id} {phrase}.",
            "type": NOTIFICATION_TYPE,
            "linkId": str(result.payment_id),
        }, namespace=NOTIFICATIONS_NAMESPACE)

        self.push.emit_to_room(branch_room(audience.branch_id), "payment_status_changed", {
            "paymentId": result.payment_id,
            "bookingId": result.booking_id,
            "userId": audience.user_id,
            "previousStatus": result.previous_status,
            "status": result.status,
            "fieldStatus": result.field_status,
        })
