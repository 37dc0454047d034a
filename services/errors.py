class ReconciliationError(Exception):
    """Base class for payment reconciliation failures."""


class InvalidNotification(ReconciliationError):
    """Webhook body is missing a required field or carries a malformed value."""


class InvalidPaymentIdentifier(InvalidNotification):
    def __init__(self, order_id):
        super().__init__(f"Invalid payment ID format: {order_id!r}")
        self.order_id = order_id


class PaymentNotFound(ReconciliationError):
    def __init__(self, payment_id: int):
        super().__init__(f"Payment with ID {payment_id} not found")
        self.payment_id = payment_id


class PersistenceFailure(ReconciliationError):
    """The atomic update was rolled back."""

    def __init__(self, payment_id: int, reason: str):
        super().__init__(f"Failed to persist payment #{payment_id}: {reason}")
        self.payment_id = payment_id
