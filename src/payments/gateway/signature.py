"""Checkout callback signatures.

The gateway signs ``"{gateway_order_id}|{gateway_payment_id}"`` with the
merchant key secret using HMAC-SHA256 and sends the hex digest back through
the client. Verification is a pure function of those three inputs.
"""

import hashlib
import hmac


def compute_signature(secret: str, gateway_order_id: str, gateway_payment_id: str) -> str:
    message = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signature_matches(secret: str, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
    """Constant-time comparison of ``signature`` with the expected digest."""
    if not signature:
        return False
    expected = compute_signature(secret, gateway_order_id, gateway_payment_id)
    return hmac.compare_digest(expected, signature.strip().lower())
