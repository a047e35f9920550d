"""Payment gateway port (abstract interface).

Defines the contract that every gateway adapter implements, so checkout code
can swap between FakeGateway (dev/test) and RazorpayGateway (production)
without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentIntent:
    """A pending charge created on the gateway and correlated to a local order."""

    gateway_order_id: str
    amount: int  # minor currency units
    currency: str
    receipt: str
    status: str = "created"
    raw: dict = field(default_factory=dict, compare=False)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    public_key: str

    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        receipt: str,
        idempotency_key: str,
    ) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units.

        Raises ``PaymentGatewayError`` when the gateway is unreachable or
        rejects the request.
        """
        ...

    @abstractmethod
    def verify_payment_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> bool:
        """Check that a checkout callback was signed by the gateway."""
        ...
