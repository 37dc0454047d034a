import hashlib
import hmac

from flask import current_app


def expected_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    # Midtrans: SHA-512 over order_id + status_code + gross_amount + server key
    raw = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(raw.encode("utf-8")).hexdigest()


def signature_check_enabled() -> bool:
    server_key = current_app.config.get("MIDTRANS_SERVER_KEY")
    return bool(server_key) and current_app.config.get("MIDTRANS_VERIFY_SIGNATURE", True)


def verify_notification_signature(payload: dict) -> bool:
    """
    Returns True when the notification carries a valid signature_key for the
    configured server key. Callers decide whether verification applies.
    """
    server_key = current_app.config.get("MIDTRANS_SERVER_KEY") or ""
    signature = payload.get("signature_key")
    if not signature or not server_key:
        return False

    expected = expected_signature(
        str(payload.get("order_id", "")),
        str(payload.get("status_code", "")),
        str(payload.get("gross_amount", "")),
        server_key,
    )
    return hmac.compare_digest(expected, str(signature))
