"""Order aggregate: the record of a paid purchase.

State Machine:
    pending -> confirmed -> processing -> shipped -> delivered
    cancelled (from any non-terminal state)

Customers can only cancel orders that are not yet delivered or cancelled.
Administrators may move an order to any of the six statuses, including
backwards, to correct mistakes. Orders are never deleted and their line
items are snapshots that never point back at a live product.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.shared.errors import InvalidArgument
from storefront.shared.queries import fetch_all


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    COD = "cod"
    CARD = "card"
    UPI = "upi"
    NETBANKING = "netbanking"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


_TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Address collection happens outside checkout; paid orders start with this.
PLACEHOLDER = "To be updated"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    name = String(max_length=100)
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)
    phone = String(max_length=30)

    @classmethod
    def placeholder(cls, name):
        return cls(
            name=name,
            street=PLACEHOLDER,
            city=PLACEHOLDER,
            state=PLACEHOLDER,
            zip_code="000000",
            country="India",
            phone="0000000000",
        )

    @property
    def is_placeholder(self):
        return self.street == PLACEHOLDER


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Line snapshot taken when the order was placed."""

    product_id = Identifier()  # Left unset for processor-confirmed orders
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    color = String(max_length=50)
    size = String(max_length=50)
    image = String(max_length=500)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=20, unique=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    transaction_id = String(max_length=255, unique=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    subtotal = Float(required=True, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    total_amount = Float(required=True, min_value=0.0)
    special_instructions = Text()
    tracking_number = String(max_length=100)
    delivered_at = DateTime()
    cancelled_by = String(choices=CancellationActor)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_add_up(self):
        if self.total_amount is None or self.subtotal is None:
            return
        expected = self.subtotal + (self.shipping_cost or 0) + (self.tax or 0)
        if abs(self.total_amount - expected) > 0.005:
            raise ValidationError({"total_amount": ["Total must equal subtotal + shipping + tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place_paid(cls, user_id, order_number, items, totals, transaction_id, customer_name, payment_method="card"):
        """An order for a checkout session the processor reports as paid."""
        from storefront.order.events import OrderPlaced

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            order_number=order_number,
            shipping_address=ShippingAddress.placeholder(customer_name),
            payment_method=payment_method,
            payment_status=PaymentStatus.COMPLETED.value,
            transaction_id=transaction_id,
            status=OrderStatus.CONFIRMED.value,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            total_amount=totals.total,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(
                OrderItem(
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    color=item.color,
                    size=item.size,
                    image=item.image,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                user_id=user_id,
                transaction_id=transaction_id,
                total_amount=totals.total,
                item_count=sum(item.quantity for item in items),
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    @property
    def is_terminal(self):
        return OrderStatus(self.status) in _TERMINAL_STATES

    def change_status(self, new_status, tracking_number=None):
        """Move to any recognised status; no ordering between statuses is enforced."""
        from storefront.order.events import OrderStatusChanged

        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidArgument(f"Invalid order status: {new_status}", field="status") from None

        previous = self.status
        self.status = target.value

        if target == OrderStatus.SHIPPED and tracking_number:
            self.tracking_number = tracking_number
        if target == OrderStatus.DELIVERED:
            self.delivered_at = datetime.now(UTC)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                tracking_number=self.tracking_number,
            )
        )

    def cancel(self, actor):
        from storefront.order.events import OrderCancelled

        previous = self.status
        self.change_status(OrderStatus.CANCELLED.value)
        self.cancelled_by = CancellationActor(actor).value
        self.raise_(
            OrderCancelled(
                order_id=self.id,
                order_number=self.order_number,
                previous_status=previous,
                cancelled_by=self.cancelled_by,
            )
        )

    def is_owned_by(self, user_id):
        return user_id is not None and str(self.user_id) == str(user_id)


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_transaction_id(self, transaction_id: str) -> Order | None:
        return self._dao.query.filter(transaction_id=transaction_id).all().first

    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def for_user(self, user_id) -> list[Order]:
        orders = fetch_all(self._dao.query.filter(user_id=str(user_id)))
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def all_orders(self, status: str | None = None) -> list[Order]:
        query = self._dao.query.filter(status=status) if status else self._dao.query
        orders = fetch_all(query)
        return sorted(orders, key=lambda order: order.created_at, reverse=True)
