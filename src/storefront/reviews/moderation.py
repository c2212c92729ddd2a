"""Review moderation: command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.reviews.editing import load_review
from storefront.reviews.review import Review


@storefront.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    is_approved = Boolean(required=True)


@storefront.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        review = load_review(command.review_id)
        review.moderate(command.is_approved)
        current_domain.repository_for(Review).add(review)
        return str(review.id)
