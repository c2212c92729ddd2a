"""Order totals: subtotal, shipping, tax and grand total."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.settings import Settings
from storefront.shared.money import round_cents, round_half_up, to_decimal


@dataclass(frozen=True)
class OrderLine:
    name: str
    price: float
    quantity: int
    color: str | None = None
    size: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    shipping_cost: float
    tax: float
    total: float


def compute_totals(lines: list[OrderLine], settings: Settings) -> OrderTotals:
    """Price a list of lines.

    Shipping is free only when the subtotal is strictly above the threshold.
    Tax is a percentage of the subtotal rounded half up to a whole unit.
    """
    subtotal = sum((to_decimal(line.price) * line.quantity for line in lines), Decimal(0))
    free_shipping = subtotal > to_decimal(settings.free_shipping_threshold)
    shipping = Decimal(0) if free_shipping else to_decimal(settings.flat_shipping_fee)
    tax = Decimal(round_half_up(subtotal * to_decimal(settings.tax_rate)))

    return OrderTotals(
        subtotal=round_cents(subtotal),
        shipping_cost=round_cents(shipping),
        tax=round_cents(tax),
        total=round_cents(subtotal + shipping + tax),
    )
