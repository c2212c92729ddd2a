"""Product aggregate root with Image entity and rating/dimension value objects."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.shared.clock import utc_now
from storefront.shared.identifiers import generate_sku
from storefront.shared.queries import fetch_all


class ProductStatus(Enum):
    AVAILABLE = "available"
    SOLD_OUT = "sold-out"
    DISCONTINUED = "discontinued"


def _json_list(values):
    if values is None:
        return None
    if isinstance(values, str):
        values = [part.strip() for part in values.split(",")]
    return json.dumps([str(v) for v in values if str(v).strip()])


def _load_list(raw):
    return json.loads(raw) if raw else []


@storefront.value_object(part_of="Product")
class RatingSummary:
    """Canonical rating aggregate, recomputed from approved reviews."""

    average: Float(default=0.0, min_value=0.0, max_value=5.0)
    count: Integer(default=0, min_value=0)


@storefront.value_object(part_of="Product")
class Dimensions:
    length: Float(min_value=0.0)
    width: Float(min_value=0.0)
    height: Float(min_value=0.0)


@storefront.entity(part_of="Product")
class Image:
    url: String(required=True, max_length=500)
    alt: String(max_length=255)
    position: Integer(default=0)


@storefront.aggregate
class Product:
    """A sellable product.

    ``status`` is derived from ``stock`` on every change: no stock means
    sold-out, and restocking a sold-out product makes it available again.
    ``discontinued`` is only ever set explicitly.
    """

    name: String(required=True, max_length=100)
    description: String(required=True, max_length=2000)
    price: Float(required=True, min_value=0.0)
    stock: Integer(required=True, min_value=0, default=0)
    sku: String(max_length=50, unique=True)
    status: String(choices=ProductStatus, default=ProductStatus.AVAILABLE.value)
    category_id: Identifier(required=True)
    colors: Text()
    sizes: Text()
    materials: Text()
    tags: Text()
    images: HasMany(Image)
    weight: Float(min_value=0.0)
    dimensions: ValueObject(Dimensions)
    rating: ValueObject(RatingSummary)
    is_featured: Boolean(default=False)
    is_active: Boolean(default=True)
    created_by: Identifier()
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def sold_out_matches_stock(self):
        if self.status == ProductStatus.SOLD_OUT.value and self.stock and self.stock > 0:
            raise ValidationError({"status": ["A product with stock cannot be sold-out"]})

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        category_id,
        stock=0,
        sku=None,
        status=None,
        colors=None,
        sizes=None,
        materials=None,
        tags=None,
        images=None,
        weight=None,
        dimensions=None,
        is_featured=False,
        created_by=None,
    ):
        from storefront.catalogue.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            stock=stock,
            sku=sku or generate_sku(),
            status=cls._derive_status(status or ProductStatus.AVAILABLE.value, stock),
            category_id=category_id,
            colors=_json_list(colors),
            sizes=_json_list(sizes),
            materials=_json_list(materials),
            tags=_json_list(tags),
            weight=weight,
            dimensions=dimensions,
            rating=RatingSummary(average=0.0, count=0),
            is_featured=is_featured,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        for image in images or []:
            product.add_image(image["url"], image.get("alt"))

        product.raise_(
            ProductCreated(
                product_id=product.id,
                category_id=product.category_id,
                name=product.name,
                first_image_url=product.first_image_url,
            )
        )
        return product

    @staticmethod
    def _derive_status(status, stock):
        if stock == 0:
            return ProductStatus.SOLD_OUT.value
        if status == ProductStatus.SOLD_OUT.value and stock and stock > 0:
            return ProductStatus.AVAILABLE.value
        return status

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def ordered_images(self):
        return sorted(self.images, key=lambda image: image.position or 0)

    @property
    def first_image_url(self):
        images = self.ordered_images
        return images[0].url if images else None

    @property
    def is_purchasable(self):
        return self.is_active and self.status == ProductStatus.AVAILABLE.value

    def variant_axes(self):
        return {
            "colors": _load_list(self.colors),
            "sizes": _load_list(self.sizes),
            "materials": _load_list(self.materials),
            "tags": _load_list(self.tags),
        }

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_image(self, url, alt=None):
        self.add_images(Image(url=url, alt=alt, position=len(self.images)))

    def replace_images(self, images):
        for existing in list(self.images):
            self.remove_images(existing)
        for image in images:
            self.add_image(image["url"], image.get("alt"))

    def update_details(self, **changes):
        """Apply a partial update and announce it for category image sync."""
        from storefront.catalogue.product.events import ProductUpdated

        previous_category_id = str(self.category_id)
        previous_first_image_url = self.first_image_url

        for list_field in ("colors", "sizes", "materials", "tags"):
            if changes.get(list_field) is not None:
                setattr(self, list_field, _json_list(changes.pop(list_field)))
            else:
                changes.pop(list_field, None)

        images = changes.pop("images", None)
        if images is not None:
            self.replace_images(images)

        with atomic_change(self):
            for field_name, value in changes.items():
                if value is not None:
                    setattr(self, field_name, value)

            self.status = self._derive_status(self.status, self.stock)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                category_id=self.category_id,
                previous_category_id=previous_category_id,
                first_image_url=self.first_image_url,
                previous_first_image_url=previous_first_image_url,
            )
        )

    def deactivate(self):
        from storefront.catalogue.product.events import ProductDeactivated

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDeactivated(product_id=self.id, category_id=self.category_id))

    def refresh_rating(self, average, count):
        self.rating = RatingSummary(average=average, count=count)


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_active(self, product_id) -> Product | None:
        return self._dao.query.filter(id=str(product_id), is_active=True).all().first

    def active_in_category(self, category_id) -> list[Product]:
        products = fetch_all(self._dao.query.filter(category_id=str(category_id), is_active=True))
        return sorted(products, key=lambda product: product.created_at)

    def count_active_in_category(self, category_id) -> int:
        return self._dao.query.filter(category_id=str(category_id), is_active=True).all().total

    def find_by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku).all().first

    def all_active(self) -> list[Product]:
        return fetch_all(self._dao.query.filter(is_active=True))
