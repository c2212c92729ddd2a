"""Review editing: command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.reviews.review import Review
from storefront.shared.errors import NotFound


@storefront.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    actor_id = Identifier()
    actor_is_admin = Boolean(default=False)
    rating = Integer()
    title = String(max_length=100)
    comment = String(max_length=1000)


def load_review(review_id) -> Review:
    review = current_domain.repository_for(Review).find(review_id)
    if review is None:
        raise NotFound("Review not found")
    return review


@storefront.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        review = load_review(command.review_id)
        review.ensure_manageable_by(command.actor_id, bool(command.actor_is_admin))
        review.edit(rating=command.rating, title=command.title, comment=command.comment)
        current_domain.repository_for(Review).add(review)
        return str(review.id)
