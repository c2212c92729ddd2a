"""Review aggregate: moderated shopper feedback on a product.

Reviews are visible as soon as they are created. Editing puts a review back
into moderation; only approved reviews count towards a product's rating.
Anonymous reviews carry a reviewer name (and optionally an email) but no user.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront
from storefront.shared.errors import Forbidden, InvalidArgument
from storefront.shared.queries import fetch_all

_UNSET = object()


def _required(value, field, label):
    text = (value or "").strip()
    if not text:
        raise InvalidArgument(f"{label} is required", field=field)
    return text


def validate_rating(rating):
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidArgument("Rating must be a whole number between 1 and 5", field="rating")
    return rating


@storefront.aggregate
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier()  # Empty for anonymous reviews
    reviewer_name = String(required=True, max_length=50)
    reviewer_email = String(max_length=254)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=100)
    comment = String(required=True, max_length=1000)
    is_verified_purchase = Boolean(default=False)
    is_approved = Boolean(default=True)
    helpful_votes = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def submit(
        cls,
        product_id,
        reviewer_name,
        rating,
        title,
        comment,
        reviewer_email=None,
        user_id=None,
        is_verified_purchase=False,
    ):
        from storefront.reviews.events import ReviewSubmitted

        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            user_id=user_id,
            reviewer_name=_required(reviewer_name, "reviewerName", "Reviewer name"),
            reviewer_email=reviewer_email.strip().lower() if reviewer_email else None,
            rating=validate_rating(rating),
            title=_required(title, "title", "Review title"),
            comment=_required(comment, "comment", "Review comment"),
            is_verified_purchase=is_verified_purchase,
            is_approved=True,
            created_at=now,
            updated_at=now,
        )
        review.raise_(ReviewSubmitted(review_id=review.id, product_id=product_id, rating=review.rating))
        return review

    def ensure_manageable_by(self, actor_id, is_admin=False):
        """Only the author or an admin may change or delete a review."""
        if is_admin:
            return
        if self.user_id is None or actor_id is None or str(self.user_id) != str(actor_id):
            raise Forbidden("Not authorized to modify this review")

    def edit(self, rating=_UNSET, title=_UNSET, comment=_UNSET):
        from storefront.reviews.events import ReviewEdited

        with atomic_change(self):
            if rating is not _UNSET and rating is not None:
                self.rating = validate_rating(rating)
            if title is not _UNSET and title is not None:
                self.title = _required(title, "title", "Review title")
            if comment is not _UNSET and comment is not None:
                self.comment = _required(comment, "comment", "Review comment")
            self.is_approved = False
            self.updated_at = datetime.now(UTC)

        self.raise_(ReviewEdited(review_id=self.id, product_id=self.product_id, rating=self.rating))

    def moderate(self, approved):
        from storefront.reviews.events import ReviewModerated

        self.is_approved = bool(approved)
        self.updated_at = datetime.now(UTC)
        self.raise_(ReviewModerated(review_id=self.id, product_id=self.product_id, is_approved=self.is_approved))

    def withdraw(self):
        """Hide the review ahead of its deletion."""
        from storefront.reviews.events import ReviewRemoved

        self.is_approved = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ReviewRemoved(review_id=self.id, product_id=self.product_id))

    def mark_helpful(self):
        self.helpful_votes = (self.helpful_votes or 0) + 1


@storefront.repository(part_of=Review)
class ReviewRepository:
    def approved_for_product(self, product_id) -> list[Review]:
        reviews = fetch_all(self._dao.query.filter(product_id=str(product_id), is_approved=True))
        return sorted(reviews, key=lambda review: review.created_at, reverse=True)

    def listing(self, is_approved: bool | None = None) -> list[Review]:
        query = self._dao.query.filter(is_approved=is_approved) if is_approved is not None else self._dao.query
        return sorted(fetch_all(query), key=lambda review: review.created_at, reverse=True)

    def find(self, review_id) -> Review | None:
        return self._dao.query.filter(id=str(review_id)).all().first
