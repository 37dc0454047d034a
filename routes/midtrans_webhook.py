import logging
from flask import Blueprint, current_app, jsonify, request

from security.midtrans_signature import signature_check_enabled, verify_notification_signature
from services.errors import InvalidNotification, InvalidPaymentIdentifier, PaymentNotFound
from utils.midtrans import GatewayNotification, is_test_notification

logger = logging.getLogger(__name__)

webhook_bp = Blueprint("webhook", __name__, url_prefix="/webhooks")


@webhook_bp.post("/midtrans")
def midtrans_notification():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify(success=False, message="Malformed notification body", error="Body must be a JSON object"), 400

    order_id = payload.get("order_id")
    logger.info("Midtrans notification received: order_id=%s transaction_status=%s",
                order_id, payload.get("transaction_status"))

    if is_test_notification(order_id):
        logger.info("Midtrans test notification acknowledged: %s", order_id)
        return jsonify(success=True, message="Test notification acknowledged"), 200

    if signature_check_enabled():
        if not verify_notification_signature(payload):
            logger.warning("Rejected Midtrans notification with invalid signature: order_id=%s", order_id)
            return jsonify(success=False, message="Invalid signature key"), 400
    elif payload.get("signature_key"):
        logger.warning("MIDTRANS_SERVER_KEY not configured; signature_key not verified")

    reconciler = current_app.extensions["payment_reconciler"]
    try:
        notification = GatewayNotification.from_payload(payload, reconciler.order_prefix)
    except InvalidPaymentIdentifier as exc:
        logger.error("Invalid payment ID in order_id=%r", order_id)
        return jsonify(success=False, message="Invalid payment ID format", error=str(exc)), 400
    except InvalidNotification as exc:
        return jsonify(success=False, message="Malformed notification body", error=str(exc)), 400

    try:
        result = reconciler.reconcile(notification)
    except PaymentNotFound as exc:
        logger.error(str(exc))
        return jsonify(success=False, message="Payment not found", paymentId=notification.payment_id), 404
    except Exception as exc:
        # Midtrans retries anything but a 200. Once the payment is identified,
        # acknowledge and leave the failure to the logs.
        logger.exception("Error processing Midtrans notification for payment #%s", notification.payment_id)
        return jsonify(
            success=False,
            message="Error encountered but webhook acknowledged",
            paymentId=notification.payment_id,
            error=str(exc),
        ), 200

    return jsonify(
        success=True,
        message="Webhook processed successfully",
        paymentId=result.payment_id,
        status=result.status.value,
        fieldStatus=result.field_status,
    ), 200
