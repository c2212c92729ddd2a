"""Human-facing identifiers: SKUs and order numbers."""

import secrets
import time
from datetime import UTC, datetime

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_sku(prefix: str = "NYH") -> str:
    """``<prefix>-<epoch ms>-<9 base36 chars>``, upper-cased."""
    return f"{prefix}-{int(time.time() * 1000)}-{random_base36(9)}".upper()


def generate_order_number(prefix: str = "NYH", now: datetime | None = None) -> str:
    """``<prefix><yy><mm><dd><6 base36 chars>``, upper-cased."""
    now = now or datetime.now(UTC)
    return f"{prefix}{now:%y%m%d}{random_base36(6)}".upper()
