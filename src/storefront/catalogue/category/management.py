"""Category management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.domain import storefront
from storefront.shared.errors import Conflict, NotFound, Unavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=50)
    description: String(max_length=500)
    image: String(max_length=500)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=50)
    description: String(max_length=500)
    image: String(max_length=500)
    clear_image: Boolean(default=False)
    is_active: Boolean()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _ensure_unique(repo, name, slug, category_id=None):
    for existing in (repo.find_by_name(name), repo.find_by_slug(slug)):
        if existing is not None and str(existing.id) != str(category_id):
            raise Conflict("Category name already exists", field="name")


def load_category(category_id) -> Category:
    repo = current_domain.repository_for(Category)
    category = repo._dao.query.filter(id=str(category_id)).all().first
    if category is None:
        raise NotFound("Category not found")
    return category


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        category = Category.create(
            name=command.name,
            description=command.description,
            image=command.image,
        )
        _ensure_unique(repo, category.name, category.slug)
        repo.add(category)

        logger.info("category_created", category_id=str(category.id), slug=category.slug)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = load_category(command.category_id)

        if command.name is not None and command.name.strip() != category.name:
            category.update_details(name=command.name)
            _ensure_unique(repo, category.name, category.slug, category.id)

        category.update_details(description=command.description, is_active=command.is_active)

        if command.clear_image:
            category.clear_image()
        elif command.image and command.image != category.image:
            category.set_manual_image(command.image)

        repo.add(category)
        return str(category.id)

    @handle(DeleteCategory)
    def delete_category(self, command):
        from storefront.catalogue.product.product import Product

        repo = current_domain.repository_for(Category)
        category = load_category(command.category_id)

        active_products = current_domain.repository_for(Product).count_active_in_category(category.id)
        if active_products > 0:
            raise Unavailable(f"Cannot delete category. It has {active_products} active products.")

        repo._dao.delete(category)
        logger.info("category_deleted", category_id=str(category.id), name=category.name)
        return str(category.id)
