"""Storefront bounded context: catalogue, carts, checkout, orders and reviews.

A single domain keeps the cart's stock checks and the order placement
synchronous against the catalogue. External collaborators (payment
processor, image storage, identity) are ports injected by the app factory.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
