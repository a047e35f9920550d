"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (default)
- RazorpayGateway when ``PAYMENT_GATEWAY=razorpay``
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.razorpay_adapter import RazorpayGateway
from shared.settings import get_settings

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    settings = get_settings()
    if settings.payment_gateway == "razorpay":
        return RazorpayGateway(
            key_id=settings.gateway_key_id,
            key_secret=settings.gateway_key_secret,
            api_url=settings.gateway_api_url,
            timeout=settings.gateway_timeout_seconds,
            max_retries=settings.gateway_max_retries,
        )
    return FakeGateway(key_id=settings.gateway_key_id, key_secret=settings.gateway_key_secret)


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the settings-derived gateway."""
    global _current_gateway
    _current_gateway = None
