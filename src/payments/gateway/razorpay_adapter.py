"""Razorpay payment gateway adapter.

Creates gateway orders through the Razorpay REST API and verifies checkout
callback signatures locally with the merchant key secret.
"""

import requests
import structlog

from payments.gateway.port import PaymentGateway, PaymentIntent
from payments.gateway.signature import signature_matches
from shared.errors import PaymentGatewayError

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    """Production gateway adapter backed by ``POST /v1/orders``."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        max_retries: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        self.public_key = key_id
        self._key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.auth = (key_id, key_secret)

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        receipt: str,
        idempotency_key: str,
    ) -> PaymentIntent:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
            "notes": {"idempotency_key": idempotency_key},
        }
        response = self._post("/orders", payload)

        if not response.ok:
            logger.error(
                "Gateway rejected order creation",
                status_code=response.status_code,
                receipt=receipt,
                body=response.text[:500],
            )
            raise PaymentGatewayError(
                "Payment gateway rejected the request",
                details={"status_code": response.status_code},
            )

        try:
            body = response.json()
            gateway_order_id = body["id"]
        except (ValueError, KeyError, TypeError) as exc:
            raise PaymentGatewayError("Malformed response from payment gateway") from exc

        return PaymentIntent(
            gateway_order_id=gateway_order_id,
            amount=int(body.get("amount", amount)),
            currency=body.get("currency", currency),
            receipt=body.get("receipt", receipt),
            status=body.get("status", "created"),
            raw=body,
        )

    def _post(self, path: str, payload: dict) -> requests.Response:
        """POST with a bounded timeout, retrying only transport failures.

        The same payload (and therefore the same idempotency key and receipt)
        is sent on every attempt.
        """
        url = f"{self.api_url}{path}"
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.session.post(url, json=payload, timeout=self.timeout)
            except (requests.ConnectionError, requests.Timeout) as exc:
                if attempt == attempts:
                    logger.error("Payment gateway unreachable", url=url, attempts=attempts)
                    raise PaymentGatewayError("Payment gateway unreachable") from exc
                logger.warning("Payment gateway call failed, retrying", url=url, attempt=attempt)

    def verify_payment_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        return signature_matches(self._key_secret, gateway_order_id, gateway_payment_id, signature)
