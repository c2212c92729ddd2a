"""Runtime settings read from the environment.

Protean's own configuration (databases, brokers, processing mode) lives in
``domain.toml``. Everything here is storefront policy or a credential for an
external collaborator.
"""

import os
from dataclasses import dataclass, field


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    frontend_url: str = "http://localhost:3000"
    checkout_currency: str = "inr"

    # Pricing policy applied when a paid session becomes an order
    free_shipping_threshold: float = 1000.0
    flat_shipping_fee: float = 100.0
    tax_rate: float = 0.18

    order_number_prefix: str = "NYH"

    stripe_secret_key: str | None = field(default=None, repr=False)
    jwt_secret: str | None = field(default=None, repr=False)
    jwt_algorithm: str = "HS256"
    cloudinary_url: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            frontend_url=os.getenv("FRONTEND_URL", cls.frontend_url).rstrip("/"),
            checkout_currency=os.getenv("CHECKOUT_CURRENCY", cls.checkout_currency).lower(),
            free_shipping_threshold=_float("FREE_SHIPPING_THRESHOLD", cls.free_shipping_threshold),
            flat_shipping_fee=_float("FLAT_SHIPPING_FEE", cls.flat_shipping_fee),
            tax_rate=_float("TAX_RATE", cls.tax_rate),
            order_number_prefix=os.getenv("ORDER_NUMBER_PREFIX", cls.order_number_prefix),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or None,
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            cloudinary_url=os.getenv("CLOUDINARY_URL") or None,
        )


def get_settings() -> Settings:
    return Settings.from_env()
