"""Product rating statistics, derived from approved reviews only.

The product's ``rating`` value object is the single stored copy. The legacy
``averageRating``/``totalReviews`` fields are produced when a product is
serialized.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from protean import handle
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.reviews.events import ReviewEdited, ReviewModerated, ReviewRemoved, ReviewSubmitted
from storefront.reviews.review import Review
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RatingStatistics:
    average: float = 0.0
    total: int = 0
    distribution: dict[int, int] = field(default_factory=lambda: dict.fromkeys(range(1, 6), 0))


def one_decimal(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def statistics_for(reviews: list[Review]) -> RatingStatistics:
    distribution = dict.fromkeys(range(1, 6), 0)
    for review in reviews:
        distribution[review.rating] += 1

    total = len(reviews)
    if total == 0:
        return RatingStatistics(distribution=distribution)

    average = sum(review.rating for review in reviews) / total
    return RatingStatistics(average=one_decimal(average), total=total, distribution=distribution)


def product_statistics(product_id) -> RatingStatistics:
    return statistics_for(current_domain.repository_for(Review).approved_for_product(product_id))


def refresh_product_rating(product_id) -> RatingStatistics:
    stats = product_statistics(product_id)
    repo = current_domain.repository_for(Product)
    product = repo._dao.query.filter(id=str(product_id)).all().first
    if product is None:
        return stats

    product.refresh_rating(stats.average, stats.total)
    repo.add(product)
    return stats


@storefront.event_handler(part_of=Review)
class ProductRatingRefresh:
    @handle(ReviewSubmitted)
    def on_submitted(self, event: ReviewSubmitted):
        refresh_product_rating(event.product_id)

    @handle(ReviewEdited)
    def on_edited(self, event: ReviewEdited):
        refresh_product_rating(event.product_id)

    @handle(ReviewModerated)
    def on_moderated(self, event: ReviewModerated):
        refresh_product_rating(event.product_id)

    @handle(ReviewRemoved)
    def on_removed(self, event: ReviewRemoved):
        stats = refresh_product_rating(event.product_id)
        logger.info("product_rating_refreshed", product_id=str(event.product_id), average=stats.average)
