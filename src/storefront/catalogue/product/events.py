"""Domain events for the Product aggregate.

They carry just enough image and category state for the category image sync
to act without re-reading the product's history.
"""

from protean.fields import Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier(required=True)
    name: String(required=True)
    first_image_url: String()


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier(required=True)
    previous_category_id: Identifier(required=True)
    first_image_url: String()
    previous_first_image_url: String()


@storefront.event(part_of="Product")
class ProductDeactivated:
    """A product was soft-deleted and is no longer listed."""

    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier(required=True)
