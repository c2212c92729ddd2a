"""Payment gateway port (abstract interface).

The storefront only needs hosted checkout: create a session the shopper is
redirected to, then read the session back to learn whether it was paid.
Adapters raise ``PaymentGatewayError`` for any failure talking to the
processor; callers treat it as retryable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class PaymentGatewayError(Exception):
    """The payment processor could not be reached or rejected the call."""


@dataclass(frozen=True)
class LineItem:
    name: str
    unit_amount: int  # minor units
    quantity: int
    currency: str
    description: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(frozen=True)
class SessionState:
    id: str
    payment_status: str
    amount_total: int | None = None
    customer_email: str | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        client_reference_id: str | None = None,
    ) -> CheckoutSession:
        """Open a hosted checkout session for the given line items."""
        ...

    @abstractmethod
    def retrieve_session(self, session_id: str) -> SessionState:
        """Read back a session's payment status and metadata."""
        ...
