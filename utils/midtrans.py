"""
Midtrans notification vocabulary and the pure rules that map it onto our
payment, payment-method and field statuses.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from models.enums import FieldStatus, PaymentMethod, PaymentStatus
from services.errors import InvalidNotification, InvalidPaymentIdentifier

ORDER_ID_PREFIX = "PAY-"
TEST_ORDER_MARKER = "_test_"


class TransactionStatus(str, Enum):
    CAPTURE = "capture"
    SETTLEMENT = "settlement"
    PENDING = "pending"
    EXPIRE = "expire"
    CANCEL = "cancel"
    DENY = "deny"
    FAILURE = "failure"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, value) -> "TransactionStatus":
        try:
            status = cls(value)
        except ValueError:
            return cls.UNRECOGNIZED
        return status


SETTLED_STATUSES = {TransactionStatus.CAPTURE, TransactionStatus.SETTLEMENT}
FAILED_STATUSES = {
    TransactionStatus.EXPIRE,
    TransactionStatus.CANCEL,
    TransactionStatus.DENY,
    TransactionStatus.FAILURE,
}

FRAUD_CHALLENGE = "challenge"

# Checked in order; first token found in the lowercased label wins.
PAYMENT_METHOD_TOKENS = (
    (("credit_card", "credit"), PaymentMethod.CREDIT_CARD),
    (("gopay", "dana", "ovo", "shopeepay"), PaymentMethod.E_WALLET),
    (("bank_transfer", "transfer"), PaymentMethod.TRANSFER),
)

STATUS_PHRASES = {
    PaymentStatus.PAID: "has been completed successfully",
    PaymentStatus.DP_PAID: "down payment has been received",
    PaymentStatus.PENDING: "is awaiting confirmation",
    PaymentStatus.FAILED: "has failed",
}
DEFAULT_STATUS_PHRASE = "status has been updated"


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def map_transaction_status(transaction_status, fraud_status, amount_paid, field_full_price) -> PaymentStatus:
    """
    Map a Midtrans transaction status onto a PaymentStatus.

    Settled transactions are `paid` when the amount covers the field's full
    price and `dp_paid` when it does not, unless fraud review is pending.
    Unrecognized statuses stay `pending`; they never escalate to a paid state.
    """
    status = TransactionStatus.parse(transaction_status)

    if status in SETTLED_STATUSES:
        if fraud_status == FRAUD_CHALLENGE:
            return PaymentStatus.PENDING
        if _to_decimal(amount_paid) < _to_decimal(field_full_price):
            return PaymentStatus.DP_PAID
        return PaymentStatus.PAID

    if status is TransactionStatus.PENDING:
        return PaymentStatus.PENDING

    if status in FAILED_STATUSES:
        return PaymentStatus.FAILED

    return PaymentStatus.PENDING


def map_payment_method(payment_type: Optional[str]) -> Optional[PaymentMethod]:
    if not payment_type:
        return None
    label = payment_type.lower()
    for tokens, method in PAYMENT_METHOD_TOKENS:
        if any(token in label for token in tokens):
            return method
    return PaymentMethod.GATEWAY


def derive_field_status(payment_status, current_field_status: str) -> str:
    if payment_status in (PaymentStatus.PAID, PaymentStatus.DP_PAID):
        return FieldStatus.BOOKED.value
    if payment_status == PaymentStatus.FAILED:
        return FieldStatus.AVAILABLE.value
    return current_field_status


def status_phrase(status) -> str:
    try:
        return STATUS_PHRASES[PaymentStatus(status)]
    except (KeyError, ValueError):
        return DEFAULT_STATUS_PHRASE


def parse_order_id(order_id, prefix: str = ORDER_ID_PREFIX) -> int:
    """
    "PAY-42" and "PAY-42-RETRY-1690000000000" both name payment 42; an order
    id without the prefix must be the bare payment id.
    """
    if not isinstance(order_id, (str, int)) or isinstance(order_id, bool):
        raise InvalidPaymentIdentifier(order_id)

    raw = str(order_id).strip()
    if raw.startswith(prefix):
        raw = raw[len(prefix):].split("-", 1)[0]

    if not (raw.isascii() and raw.isdigit()):
        raise InvalidPaymentIdentifier(order_id)
    return int(raw)


def is_test_notification(order_id) -> bool:
    return isinstance(order_id, str) and TEST_ORDER_MARKER in order_id


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class GatewayNotification:
    order_id: str
    payment_id: int
    transaction_status: str
    gross_amount: Decimal
    raw_gross_amount: str
    fraud_status: Optional[str] = None
    payment_type: Optional[str] = None
    transaction_id: Optional[str] = None
    status_code: Optional[str] = None
    signature_key: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], prefix: str = ORDER_ID_PREFIX) -> "GatewayNotification":
        if not isinstance(payload, Mapping):
            raise InvalidNotification("Notification body must be a JSON object")

        order_id = payload.get("order_id")
        if order_id is None or order_id == "":
            raise InvalidNotification("Missing order_id")
        payment_id = parse_order_id(order_id, prefix)

        transaction_status = payload.get("transaction_status")
        if not isinstance(transaction_status, str) or not transaction_status:
            raise InvalidNotification("Missing transaction_status")

        raw_amount = payload.get("gross_amount")
        if raw_amount is None or raw_amount == "" or isinstance(raw_amount, bool):
            raise InvalidNotification("Missing gross_amount")
        try:
            gross_amount = Decimal(str(raw_amount))
        except InvalidOperation:
            raise InvalidNotification(f"Invalid gross_amount: {raw_amount!r}")
        if not gross_amount.is_finite():
            raise InvalidNotification(f"Invalid gross_amount: {raw_amount!r}")

        return cls(
            order_id=str(order_id),
            payment_id=payment_id,
            transaction_status=transaction_status,
            gross_amount=gross_amount,
            raw_gross_amount=str(raw_amount),
            fraud_status=_optional_str(payload, "fraud_status"),
            payment_type=_optional_str(payload, "payment_type"),
            transaction_id=_optional_str(payload, "transaction_id"),
            status_code=_optional_str(payload, "status_code"),
            signature_key=_optional_str(payload, "signature_key"),
        )
