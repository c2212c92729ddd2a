"""Review removal: command and handler.

The review is deleted in the command's unit of work. ``ReviewRemoved`` is
still dispatched after commit so the product's rating can be recomputed.
"""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.reviews.editing import load_review
from storefront.reviews.review import Review
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class RemoveReview:
    review_id = Identifier(required=True)
    actor_id = Identifier()
    actor_is_admin = Boolean(default=False)


@storefront.command_handler(part_of=Review)
class RemoveReviewHandler:
    @handle(RemoveReview)
    def remove_review(self, command):
        repo = current_domain.repository_for(Review)
        review = load_review(command.review_id)
        review.ensure_manageable_by(command.actor_id, bool(command.actor_is_admin))

        review.withdraw()
        # Registers the review, and its event, with the unit of work before the row goes
        repo.add(review)
        repo._dao.delete(review)

        logger.info("review_deleted", review_id=str(review.id), product_id=str(review.product_id))
        return str(review.id)
