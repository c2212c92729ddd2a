"""Checkout bridge between carts and the payment processor.

``create_session`` hands a cart snapshot to the processor and persists
nothing locally. ``verify_payment`` is polled by the shopper's browser after
the redirect back; the first call that sees a paid session places the order,
every later call finds that same order by the session id.
"""

import json
import time
from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.checkout.metadata import decode_cart, encode_cart
from storefront.identity.principal import Principal
from storefront.order.order import Order
from storefront.order.placement import GUEST_PREFIX, PlaceOrder
from storefront.payments.gateway.port import LineItem, PaymentGateway, PaymentGatewayError
from storefront.settings import Settings
from storefront.shared.errors import InvalidArgument, UpstreamError
from storefront.shared.money import to_minor_units
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutStart:
    session_id: str
    url: str
    customer_email: str
    user_id: str


@dataclass(frozen=True)
class PaymentVerification:
    paid: bool
    payment_status: str
    amount: int | None = None
    email: str | None = None
    order_id: str | None = None
    order_number: str | None = None
    order_created: bool = False


def resolve_email(principal: Principal | None, guest_email: str | None, email: str | None) -> str | None:
    """Authenticated user email first, then the explicit guest email, then the generic field."""
    for candidate in (principal.email if principal else None, guest_email, email):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def _line_item(item: dict, currency: str) -> LineItem:
    if item.get("price") is None:
        raise InvalidArgument("Every cart item needs a price", field="cartItems")
    variant = f"Size: {item.get('selectedSize') or '-'}, Color: {item.get('selectedColor') or '-'}"
    description = item.get("description") or variant
    return LineItem(
        name=item.get("name") or "Item",
        unit_amount=to_minor_units(item["price"]),
        quantity=int(item.get("quantity") or 1),
        currency=currency,
        description=description,
        image=item.get("image") or None,
    )


class CheckoutBridge:
    def __init__(self, gateway: PaymentGateway, settings: Settings) -> None:
        self.gateway = gateway
        self.settings = settings

    @property
    def success_url(self) -> str:
        return f"{self.settings.frontend_url}/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self.settings.frontend_url}/cart"

    def create_session(
        self,
        cart_items: list[dict] | None,
        principal: Principal | None = None,
        guest_email: str | None = None,
        email: str | None = None,
    ) -> CheckoutStart:
        if not cart_items:
            raise InvalidArgument("Cart is empty", field="cartItems")

        customer_email = resolve_email(principal, guest_email, email)
        if not customer_email:
            raise InvalidArgument("Email is required for checkout", field="email")

        line_items = [_line_item(item, self.settings.checkout_currency) for item in cart_items]
        user_id = principal.id if principal else f"{GUEST_PREFIX}-{int(time.time() * 1000)}"

        metadata = encode_cart(cart_items)
        metadata["customer_email"] = customer_email
        metadata["user_id"] = user_id

        try:
            session = self.gateway.create_checkout_session(
                line_items=line_items,
                customer_email=customer_email,
                success_url=self.success_url,
                cancel_url=self.cancel_url,
                metadata=metadata,
                client_reference_id=user_id,
            )
        except PaymentGatewayError as exc:
            raise UpstreamError(f"Failed to create checkout session: {exc}") from exc

        logger.info("checkout_session_created", session_id=session.id, user_id=user_id, lines=len(line_items))
        return CheckoutStart(session_id=session.id, url=session.url, customer_email=customer_email, user_id=user_id)

    def verify_payment(self, session_id: str | None) -> PaymentVerification:
        if not session_id:
            raise InvalidArgument("Session ID is required", field="session_id")

        try:
            session = self.gateway.retrieve_session(session_id)
        except PaymentGatewayError as exc:
            raise UpstreamError(f"Failed to verify payment: {exc}") from exc

        if not session.is_paid:
            return PaymentVerification(paid=False, payment_status=session.payment_status)

        customer_email = session.customer_email or session.metadata.get("customer_email")
        if not customer_email:
            raise InvalidArgument("Paid session carries no customer email", field="session_id")

        try:
            placed = current_domain.process(
                PlaceOrder(
                    session_id=session.id,
                    customer_email=customer_email,
                    user_id=session.metadata.get("user_id"),
                    items=json.dumps(decode_cart(session.metadata)),
                ),
                asynchronous=False,
            )
        except ValidationError:
            # A concurrent verification of the same session stored the order first
            existing = current_domain.repository_for(Order).find_by_transaction_id(session.id)
            if existing is None:
                raise
            placed = {"order_id": str(existing.id), "order_number": existing.order_number, "created": False}

        logger.info(
            "payment_verified",
            session_id=session.id,
            order_id=placed["order_id"],
            order_created=placed["created"],
        )
        return PaymentVerification(
            paid=True,
            payment_status=session.payment_status,
            amount=session.amount_total,
            email=customer_email,
            order_id=placed["order_id"],
            order_number=placed["order_number"],
            order_created=placed["created"],
        )
