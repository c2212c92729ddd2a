"""Helpful votes: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.reviews.editing import load_review
from storefront.reviews.review import Review


@storefront.command(part_of="Review")
class MarkReviewHelpful:
    review_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class MarkReviewHelpfulHandler:
    @handle(MarkReviewHelpful)
    def mark_helpful(self, command):
        review = load_review(command.review_id)
        review.mark_helpful()
        current_domain.repository_for(Review).add(review)
        return review.helpful_votes
