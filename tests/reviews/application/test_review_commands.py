"""Application tests for review commands and the product rating they drive."""

import json
from unittest.mock import patch

import pytest
from protean import current_domain
from storefront.catalogue.product.product import Product
from storefront.order.placement import PlaceOrder
from storefront.reviews.editing import EditReview
from storefront.reviews.moderation import ModerateReview
from storefront.reviews.rating import product_statistics
from storefront.reviews.removal import RemoveReview
from storefront.reviews.review import Review
from storefront.reviews.submission import SubmitReview
from storefront.reviews.voting import MarkReviewHelpful
from storefront.shared.errors import Forbidden, InvalidArgument, NotFound


def _submit(product, rating=4, user_id="user-1", **extra):
    defaults = {"reviewer_name": "Asha", "title": "Lovely", "comment": "Soft and well made."}
    defaults.update(extra)
    return current_domain.process(
        SubmitReview(product_id=str(product.id), user_id=user_id, rating=rating, **defaults),
        asynchronous=False,
    )


def _rating(product):
    return current_domain.repository_for(Product).get(product.id).rating


class TestSubmitReview:
    def test_submission_refreshes_product_rating(self, product):
        _submit(product, rating=5)
        _submit(product, rating=4, user_id="user-2")
        rating = _rating(product)
        assert rating.average == 4.5
        assert rating.count == 2

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            current_domain.process(
                SubmitReview(product_id="missing", reviewer_name="A", rating=4, title="T", comment="C"),
                asynchronous=False,
            )

    def test_invalid_rating(self, product):
        with pytest.raises(InvalidArgument):
            _submit(product, rating=7)
        assert _rating(product).count == 0

    def test_verified_purchase_when_user_bought_product(self, product):
        current_domain.process(
            PlaceOrder(
                session_id="cs_test_1",
                customer_email="shopper@example.com",
                user_id="user-1",
                items=json.dumps([{"name": product.name, "price": product.price, "quantity": 1}]),
            ),
            asynchronous=False,
        )
        review_id = _submit(product)
        assert current_domain.repository_for(Review).get(review_id).is_verified_purchase is True

    def test_not_verified_without_purchase(self, product):
        review_id = _submit(product)
        assert current_domain.repository_for(Review).get(review_id).is_verified_purchase is False


class TestEditReview:
    def test_edit_takes_review_out_of_rating(self, product):
        review_id = _submit(product, rating=5)
        current_domain.process(EditReview(review_id=review_id, actor_id="user-1", rating=1), asynchronous=False)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.rating == 1
        assert review.is_approved is False
        assert _rating(product).count == 0

    def test_other_user_cannot_edit(self, product):
        review_id = _submit(product)
        with pytest.raises(Forbidden):
            current_domain.process(EditReview(review_id=review_id, actor_id="user-2", rating=1), asynchronous=False)

    def test_unknown_review(self):
        with pytest.raises(NotFound):
            current_domain.process(EditReview(review_id="missing", actor_id="user-1"), asynchronous=False)


class TestModerateReview:
    def test_approval_brings_review_back(self, product):
        review_id = _submit(product, rating=3)
        current_domain.process(ModerateReview(review_id=review_id, is_approved=False), asynchronous=False)
        assert _rating(product).count == 0

        current_domain.process(ModerateReview(review_id=review_id, is_approved=True), asynchronous=False)
        rating = _rating(product)
        assert rating.count == 1
        assert rating.average == 3.0


class TestRemoveReview:
    def test_removal_deletes_and_recomputes(self, product):
        keep = _submit(product, rating=5)
        drop = _submit(product, rating=1, user_id="user-2")

        current_domain.process(RemoveReview(review_id=drop, actor_id="user-2"), asynchronous=False)

        repo = current_domain.repository_for(Review)
        assert repo.find(drop) is None
        assert repo.find(keep) is not None
        rating = _rating(product)
        assert rating.average == 5.0
        assert rating.count == 1

    def test_admin_can_remove(self, product):
        review_id = _submit(product)
        current_domain.process(
            RemoveReview(review_id=review_id, actor_id="admin-1", actor_is_admin=True),
            asynchronous=False,
        )
        assert current_domain.repository_for(Review).find(review_id) is None

    def test_review_is_gone_even_if_rating_refresh_fails(self, product):
        review_id = _submit(product)
        with patch(
            "storefront.reviews.rating.refresh_product_rating", side_effect=RuntimeError("ratings down")
        ):
            with pytest.raises(RuntimeError):
                current_domain.process(RemoveReview(review_id=review_id, actor_id="user-1"), asynchronous=False)

        assert current_domain.repository_for(Review).find(review_id) is None

    def test_other_user_cannot_remove(self, product):
        review_id = _submit(product)
        with pytest.raises(Forbidden):
            current_domain.process(RemoveReview(review_id=review_id, actor_id="user-2"), asynchronous=False)


class TestHelpfulVotes:
    def test_votes_accumulate(self, product):
        review_id = _submit(product)
        current_domain.process(MarkReviewHelpful(review_id=review_id), asynchronous=False)
        votes = current_domain.process(MarkReviewHelpful(review_id=review_id), asynchronous=False)
        assert votes == 2


class TestProductStatistics:
    def test_only_approved_reviews_count(self, product):
        _submit(product, rating=5)
        hidden = _submit(product, rating=1, user_id="user-2")
        current_domain.process(ModerateReview(review_id=hidden, is_approved=False), asynchronous=False)

        stats = product_statistics(product.id)
        assert stats.total == 1
        assert stats.distribution[1] == 0
