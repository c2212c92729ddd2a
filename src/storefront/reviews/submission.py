"""Review submission: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.reviews.review import Review
from storefront.shared.errors import NotFound


@storefront.command(part_of="Review")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier()
    reviewer_name = String(max_length=50)
    reviewer_email = String(max_length=254)
    rating = Integer()
    title = String(max_length=100)
    comment = String(max_length=1000)


def has_purchased(user_id, product: Product) -> bool:
    """Order lines are snapshots, so a purchase is recognised by product name."""
    if not user_id:
        return False
    orders = current_domain.repository_for(Order).for_user(user_id)
    return any(item.name == product.name for order in orders for item in order.items)


@storefront.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        product = current_domain.repository_for(Product).find_active(command.product_id)
        if product is None:
            raise NotFound("Product not found")

        review = Review.submit(
            product_id=str(product.id),
            user_id=command.user_id,
            reviewer_name=command.reviewer_name,
            reviewer_email=command.reviewer_email,
            rating=command.rating,
            title=command.title,
            comment=command.comment,
            is_verified_purchase=has_purchased(command.user_id, product),
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)
