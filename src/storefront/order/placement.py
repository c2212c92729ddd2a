"""Turning a paid checkout session into an order: command and handler.

The whole placement runs in one unit of work, so either the order exists
(and the shopper's cart is empty) or nothing was written at all.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.order.numbering import next_order_number
from storefront.order.order import Order
from storefront.order.pricing import OrderLine, compute_totals
from storefront.settings import get_settings
from storefront.shared.errors import InvalidArgument
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

GUEST_PREFIX = "guest"


@storefront.command(part_of="Order")
class PlaceOrder:
    session_id = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    user_id = String(max_length=100)  # Real id, or a "guest-<ms>" token
    items = Text(required=True)  # JSON list of cart snapshots


def is_guest_token(user_id) -> bool:
    return not user_id or str(user_id).startswith(GUEST_PREFIX)


def _lines(raw_items) -> list[OrderLine]:
    items = json.loads(raw_items) if raw_items else []
    if not items:
        raise InvalidArgument("Checkout session has no cart items", field="items")
    return [
        OrderLine(
            name=item.get("name") or "Item",
            price=float(item["price"]),
            quantity=int(item.get("quantity") or 1),
            color=item.get("selectedColor"),
            size=item.get("selectedSize"),
            image=item.get("image"),
        )
        for item in items
    ]


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Order)

        existing = repo.find_by_transaction_id(command.session_id)
        if existing is not None:
            return {"order_id": str(existing.id), "order_number": existing.order_number, "created": False}

        settings = get_settings()
        lines = _lines(command.items)

        if is_guest_token(command.user_id):
            customer = current_domain.repository_for(Customer).find_or_create_guest(command.customer_email)
            owner_id = str(customer.id)
            owner_name = customer.name
        else:
            owner_id = str(command.user_id)
            owner_name = command.customer_email.split("@")[0]

        order = Order.place_paid(
            user_id=owner_id,
            order_number=next_order_number(repo, settings.order_number_prefix),
            items=lines,
            totals=compute_totals(lines, settings),
            transaction_id=command.session_id,
            customer_name=owner_name,
        )
        repo.add(order)

        if not is_guest_token(command.user_id):
            cart_repo = current_domain.repository_for(Cart)
            cart = cart_repo.for_user(owner_id)
            if cart is not None and cart.items:
                cart.clear()
                cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            session_id=command.session_id,
            total=order.total_amount,
        )
        return {"order_id": str(order.id), "order_number": order.order_number, "created": True}
