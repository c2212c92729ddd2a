"""Cart aggregate: one per user, lines keyed by (product, color, size).

Stock checks are made against the stock figure the caller read from the
catalogue. Nothing is reserved, so two carts can both hold the last unit.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock, InvalidArgument, NotFound


def _variant(value):
    return value or ""


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # Snapshot at the time of adding
    color = String(max_length=50, default="")
    size = String(max_length=50, default="")
    added_at = DateTime()

    def matches(self, product_id, color, size):
        return (
            str(self.product_id) == str(product_id)
            and _variant(self.color) == _variant(color)
            and _variant(self.size) == _variant(size)
        )


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def find_item(self, product_id, color=None, size=None):
        return next((item for item in self.items if item.matches(product_id, color, size)), None)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, price, stock, color=None, size=None):
        """Add a line, or grow the matching one, without exceeding ``stock``."""
        from storefront.cart.events import CartItemAdded

        if quantity is None or quantity < 1:
            raise InvalidArgument("Quantity must be at least 1", field="quantity")

        existing = self.find_item(product_id, color, size)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if new_quantity > stock:
            raise InsufficientStock(available=stock, requested=new_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                    color=_variant(color),
                    size=_variant(size),
                    added_at=now,
                )
            )
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity=new_quantity,
            )
        )

    def update_item_quantity(self, product_id, quantity, stock, color=None, size=None):
        from storefront.cart.events import CartQuantityUpdated

        if quantity is None or quantity < 1:
            raise InvalidArgument("Quantity must be at least 1", field="quantity")

        item = self.find_item(product_id, color, size)
        if item is None:
            raise NotFound("Item not found in cart")

        if quantity > stock:
            raise InsufficientStock(available=stock, requested=quantity)

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, color=None, size=None):
        """Remove the matching line. Removing an absent line is a no-op."""
        from storefront.cart.events import CartItemRemoved

        item = self.find_item(product_id, color, size)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))
        return True

    def clear(self):
        from storefront.cart.events import CartCleared

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), user_id=str(self.user_id)))


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        return self._dao.query.filter(user_id=str(user_id)).all().first

    def get_or_create(self, user_id) -> Cart:
        cart = self.for_user(user_id)
        if cart is None:
            cart = Cart.create(user_id=str(user_id))
            self.add(cart)
        return cart
