"""Stripe Checkout adapter.

Uses hosted Checkout Sessions through a ``StripeClient`` owned by the
gateway, so the API key, retries and timeout never touch the SDK's
module-level settings and several gateways can coexist in one process.
"""

import stripe

from storefront.payments.gateway.port import (
    CheckoutSession,
    LineItem,
    PaymentGateway,
    PaymentGatewayError,
    SessionState,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _price_data(item: LineItem) -> dict:
    product_data = {"name": item.name}
    if item.description:
        product_data["description"] = item.description
    if item.image:
        product_data["images"] = [item.image]
    return {
        "currency": item.currency,
        "product_data": product_data,
        "unit_amount": item.unit_amount,
    }


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, timeout: int = 20, client: stripe.StripeClient | None = None) -> None:
        self.client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        client_reference_id: str | None = None,
    ) -> CheckoutSession:
        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [{"price_data": _price_data(item), "quantity": item.quantity} for item in line_items],
            "customer_email": customer_email,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        if client_reference_id:
            params["client_reference_id"] = client_reference_id

        try:
            session = self.client.v1.checkout.sessions.create(params=params)
        except stripe.StripeError as exc:
            logger.error("stripe_session_create_failed", error=str(exc))
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc

        return CheckoutSession(id=session.id, url=session.url)

    def retrieve_session(self, session_id: str) -> SessionState:
        try:
            session = self.client.v1.checkout.sessions.retrieve(session_id)
        except stripe.StripeError as exc:
            logger.error("stripe_session_retrieve_failed", session_id=session_id, error=str(exc))
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc

        data = session.to_dict()
        customer_email = data.get("customer_email") or (data.get("customer_details") or {}).get("email")

        return SessionState(
            id=data["id"],
            payment_status=data["payment_status"],
            amount_total=data.get("amount_total"),
            customer_email=customer_email,
            metadata=dict(data.get("metadata") or {}),
        )
