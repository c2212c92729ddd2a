"""Keep each category's auto image in step with its products.

Runs after the product change has committed. Every outcome, including a
failure, is reported as an ``ImageSyncResult``; nothing here is allowed to
fail the product mutation that triggered it.
"""

from dataclasses import dataclass

from protean import handle
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.events import ProductCreated, ProductDeactivated, ProductUpdated
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageSyncResult:
    action: str  # adopted | propagated | replaced | cleared | unchanged | failed
    category_id: str | None = None
    image: str | None = None
    product_id: str | None = None
    error: str | None = None


def _category(category_id) -> Category | None:
    if not category_id:
        return None
    return current_domain.repository_for(Category)._dao.query.filter(id=str(category_id)).all().first


def _is_active(product_id) -> bool:
    return current_domain.repository_for(Product).find_active(product_id) is not None


def adopt_image(category_id, product_id, image_url) -> ImageSyncResult:
    """A product with images joined the category."""
    category = _category(category_id)
    if category is None or not image_url or not _is_active(product_id):
        return ImageSyncResult("unchanged", category_id=category_id)

    if not category.adopt_product_image(product_id, image_url):
        return ImageSyncResult("unchanged", category_id=str(category.id), image=category.image)

    current_domain.repository_for(Category).add(category)
    return ImageSyncResult("adopted", category_id=str(category.id), image=image_url, product_id=str(product_id))


def release_image(category_id, product_id) -> ImageSyncResult:
    """The product backing the category's image left it, lost its images or was deleted."""
    category = _category(category_id)
    if category is None or not category.is_backed_by(product_id):
        return ImageSyncResult("unchanged", category_id=category_id)

    candidates = [
        product
        for product in current_domain.repository_for(Product).active_in_category(category.id)
        if str(product.id) != str(product_id) and product.first_image_url
    ]

    repo = current_domain.repository_for(Category)
    if candidates:
        successor = candidates[0]
        category.adopt_product_image(successor.id, successor.first_image_url)
        repo.add(category)
        return ImageSyncResult(
            "replaced",
            category_id=str(category.id),
            image=category.image,
            product_id=str(successor.id),
        )

    category.clear_image()
    repo.add(category)
    return ImageSyncResult("cleared", category_id=str(category.id))


def propagate_image(category_id, product_id, image_url) -> ImageSyncResult:
    """The backing product's first image changed within the same category."""
    category = _category(category_id)
    if category is None or not category.is_backed_by(product_id) or not _is_active(product_id):
        return ImageSyncResult("unchanged", category_id=category_id)

    category.adopt_product_image(product_id, image_url)
    current_domain.repository_for(Category).add(category)
    return ImageSyncResult("propagated", category_id=str(category.id), image=image_url, product_id=str(product_id))


def sync_after_create(event: ProductCreated) -> ImageSyncResult:
    return adopt_image(event.category_id, event.product_id, event.first_image_url)


def sync_after_update(event: ProductUpdated) -> ImageSyncResult:
    if str(event.category_id) != str(event.previous_category_id):
        release_image(event.previous_category_id, event.product_id)
        return adopt_image(event.category_id, event.product_id, event.first_image_url)

    if not event.first_image_url:
        return release_image(event.category_id, event.product_id)

    if event.first_image_url != event.previous_first_image_url:
        return propagate_image(event.category_id, event.product_id, event.first_image_url)

    return ImageSyncResult("unchanged", category_id=str(event.category_id))


def sync_after_deactivation(event: ProductDeactivated) -> ImageSyncResult:
    return release_image(event.category_id, event.product_id)


def run_sync(sync, event) -> ImageSyncResult:
    try:
        result = sync(event)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "category_image_sync_failed",
            product_id=str(event.product_id),
            category_id=str(event.category_id),
            error=str(exc),
            exc_info=True,
        )
        return ImageSyncResult("failed", category_id=str(event.category_id), error=str(exc))

    if result.action != "unchanged":
        logger.info(
            "category_image_synced",
            action=result.action,
            category_id=result.category_id,
            product_id=result.product_id,
        )
    return result


@storefront.event_handler(part_of=Product)
class CategoryImageSync:
    @handle(ProductCreated)
    def on_product_created(self, event: ProductCreated):
        return run_sync(sync_after_create, event)

    @handle(ProductUpdated)
    def on_product_updated(self, event: ProductUpdated):
        return run_sync(sync_after_update, event)

    @handle(ProductDeactivated)
    def on_product_deactivated(self, event: ProductDeactivated):
        return run_sync(sync_after_deactivation, event)
