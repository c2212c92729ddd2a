"""Domain events for the Review aggregate.

Each one can change which reviews are approved, so each one triggers a
rating refresh for the product concerned.
"""

from protean.fields import Boolean, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)


@storefront.event(part_of="Review")
class ReviewEdited:
    """The author changed the review; it awaits moderation again."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)


@storefront.event(part_of="Review")
class ReviewModerated:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    is_approved = Boolean(required=True)


@storefront.event(part_of="Review")
class ReviewRemoved:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
