"""Configurable fake payment gateway for development and testing.

Sessions live in memory. A session starts ``unpaid`` and becomes ``paid``
once ``mark_paid`` is called, which stands in for the shopper completing the
hosted payment page. ``configure`` makes every call fail, to exercise the
upstream-error path.
"""

from uuid import uuid4

from storefront.payments.gateway.port import (
    CheckoutSession,
    LineItem,
    PaymentGateway,
    PaymentGatewayError,
    SessionState,
)


class FakeCheckoutGateway(PaymentGateway):
    """Configurable in-memory checkout gateway."""

    def __init__(self, base_url: str = "https://checkout.fake.test/pay") -> None:
        self.base_url = base_url
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment processor unavailable"
        self.sessions: dict[str, dict] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _check(self) -> None:
        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        client_reference_id: str | None = None,
    ) -> CheckoutSession:
        self.calls.append({"method": "create_checkout_session", "customer_email": customer_email})
        self._check()

        session_id = f"cs_test_{uuid4().hex[:24]}"
        self.sessions[session_id] = {
            "line_items": list(line_items),
            "customer_email": customer_email,
            "success_url": success_url.replace("{CHECKOUT_SESSION_ID}", session_id),
            "cancel_url": cancel_url,
            "metadata": dict(metadata),
            "client_reference_id": client_reference_id,
            "payment_status": "unpaid",
        }
        return CheckoutSession(id=session_id, url=f"{self.base_url}/{session_id}")

    def retrieve_session(self, session_id: str) -> SessionState:
        self.calls.append({"method": "retrieve_session", "session_id": session_id})
        self._check()

        session = self.sessions.get(session_id)
        if session is None:
            raise PaymentGatewayError(f"No such checkout session: {session_id}")

        return SessionState(
            id=session_id,
            payment_status=session["payment_status"],
            amount_total=sum(item.unit_amount * item.quantity for item in session["line_items"]),
            customer_email=session["customer_email"],
            metadata=dict(session["metadata"]),
        )

    def mark_paid(self, session_id: str) -> None:
        self.sessions[session_id]["payment_status"] = "paid"
