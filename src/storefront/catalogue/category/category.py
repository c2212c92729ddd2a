"""Category aggregate: a named, slugged grouping of products with a display image."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront
from storefront.shared.clock import utc_now
from storefront.shared.errors import InvalidArgument
from storefront.shared.queries import fetch_all
from storefront.shared.slug import slugify


class ImageSource(Enum):
    MANUAL = "manual"
    AUTO_FROM_PRODUCT = "auto-from-product"


@storefront.aggregate
class Category:
    """A storefront category.

    The display image is either set by an admin (``manual``) or mirrors the
    first image of one of the category's products (``auto-from-product``), in
    which case ``image_from_product`` names the product backing it.
    """

    name: String(required=True, max_length=50, unique=True)
    slug: String(max_length=60, unique=True)
    description: String(max_length=500)
    image: String(max_length=500)
    image_source: String(choices=ImageSource, default=ImageSource.MANUAL.value)
    image_from_product: Identifier()
    is_active: Boolean(default=True)
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @classmethod
    def create(cls, name, description=None, image=None):
        from storefront.catalogue.category.events import CategoryCreated

        name = (name or "").strip()
        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=cls.slug_for(name),
            description=description,
            image=image or None,
            image_source=ImageSource.MANUAL.value,
            created_at=now,
            updated_at=now,
        )
        category.raise_(CategoryCreated(category_id=category.id, name=category.name, slug=category.slug))
        return category

    @staticmethod
    def slug_for(name):
        slug = slugify(name)
        if not slug:
            raise InvalidArgument("Category name must contain letters or digits", field="name")
        return slug

    @property
    def is_auto_image(self):
        return self.image_source == ImageSource.AUTO_FROM_PRODUCT.value

    def is_backed_by(self, product_id):
        if not self.is_auto_image or self.image_from_product is None:
            return False
        return str(self.image_from_product) == str(product_id)

    def update_details(self, name=None, description=None, is_active=None):
        if name is not None:
            name = name.strip()
            self.slug = self.slug_for(name)
            self.name = name
        if description is not None:
            self.description = description
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Display image
    # -------------------------------------------------------------------
    def set_manual_image(self, url):
        self.image = url
        self.image_source = ImageSource.MANUAL.value
        self.image_from_product = None
        self.updated_at = datetime.now(UTC)

    def clear_image(self):
        self.set_manual_image(None)

    def adopt_product_image(self, product_id, url):
        """Mirror a product's first image. A manual image is never overridden."""
        if self.image and not self.is_auto_image:
            return False

        self.image = url
        self.image_source = ImageSource.AUTO_FROM_PRODUCT.value
        self.image_from_product = str(product_id)
        self.updated_at = datetime.now(UTC)
        return True


@storefront.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str) -> Category | None:
        return self._dao.query.filter(slug=slug).all().first

    def find_by_name(self, name: str) -> Category | None:
        return self._dao.query.filter(name=name).all().first

    def active(self) -> list[Category]:
        categories = fetch_all(self._dao.query.filter(is_active=True))
        return sorted(categories, key=lambda category: category.name.lower())
