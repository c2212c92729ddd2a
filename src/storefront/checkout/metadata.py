"""Cart snapshot stored in checkout session metadata.

Processors cap each metadata value (Stripe: 500 characters, 50 keys), so the
serialized cart is split across ``cart_0``, ``cart_1`` and so on and joined
again on the way back.
"""

import json

from storefront.shared.errors import InvalidArgument

CHUNK_SIZE = 500
MAX_CART_KEYS = 45
CART_KEY_PREFIX = "cart_"
SNAPSHOT_FIELDS = ("productId", "name", "price", "quantity", "selectedColor", "selectedSize", "image")


def snapshot(item: dict) -> dict:
    """Keep only what an order line needs, dropping empty values."""
    kept = {key: item.get(key) for key in SNAPSHOT_FIELDS}
    kept["quantity"] = kept["quantity"] or 1
    return {key: value for key, value in kept.items() if value not in (None, "")}


def encode_cart(items: list[dict]) -> dict[str, str]:
    payload = json.dumps([snapshot(item) for item in items], separators=(",", ":"))
    chunks = [payload[i : i + CHUNK_SIZE] for i in range(0, len(payload), CHUNK_SIZE)]
    if len(chunks) > MAX_CART_KEYS:
        raise InvalidArgument("Cart is too large to check out in one session", field="cartItems")
    return {f"{CART_KEY_PREFIX}{index}": chunk for index, chunk in enumerate(chunks)}


def decode_cart(metadata: dict[str, str]) -> list[dict]:
    indexes = sorted(int(key[len(CART_KEY_PREFIX) :]) for key in metadata if key.startswith(CART_KEY_PREFIX))
    payload = "".join(metadata[f"{CART_KEY_PREFIX}{index}"] for index in indexes)
    return json.loads(payload) if payload else []
