from storefront.shared.identifiers import generate_order_number

MAX_ATTEMPTS = 10


def next_order_number(repo, prefix: str) -> str:
    """Generate an order number not yet used by any order in ``repo``."""
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_order_number(prefix)
        if repo.find_by_order_number(candidate) is None:
            return candidate
    raise RuntimeError("Could not generate a unique order number")
