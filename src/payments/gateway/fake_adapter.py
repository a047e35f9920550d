"""Configurable fake payment gateway for development and testing.

Simulates the gateway without any external calls. It can be toggled at
runtime to fail intent creation (via /checkout/gateway/configure), records
every call it receives, and signs callbacks with the same HMAC scheme as the
real gateway so the verification path is exercised end to end.
"""

from uuid import uuid4

from payments.gateway.port import PaymentGateway, PaymentIntent
from payments.gateway.signature import compute_signature, signature_matches
from shared.errors import PaymentGatewayError


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, key_id: str = "rzp_test_key", key_secret: str = "rzp_test_secret") -> None:
        self.public_key = key_id
        self._key_secret = key_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []
        self._intents: dict[str, PaymentIntent] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        receipt: str,
        idempotency_key: str,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "idempotency_key": idempotency_key,
            }
        )

        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason, details={"gateway": "fake"})

        if idempotency_key in self._intents:
            return self._intents[idempotency_key]

        intent = PaymentIntent(
            gateway_order_id=f"order_fake{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
        )
        self._intents[idempotency_key] = intent
        return intent

    def sign(self, gateway_order_id: str, gateway_payment_id: str) -> str:
        """Produce the signature the gateway would hand back to the client."""
        return compute_signature(self._key_secret, gateway_order_id, gateway_payment_id)

    def verify_payment_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        self.calls.append(
            {
                "method": "verify_payment_signature",
                "gateway_order_id": gateway_order_id,
                "gateway_payment_id": gateway_payment_id,
            }
        )
        return signature_matches(self._key_secret, gateway_order_id, gateway_payment_id, signature)
