"""Product updates: command and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.management import load_category
from storefront.catalogue.product.creation import decode_dimensions, decode_json
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.errors import NotFound


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update; ``None`` fields are left untouched."""

    product_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=2000)
    price: Float(min_value=0.0)
    stock: Integer(min_value=0)
    category_id: Identifier()
    status: String(max_length=20)
    colors: Text()
    sizes: Text()
    materials: Text()
    tags: Text()
    images: Text()
    weight: Float(min_value=0.0)
    dimensions: Text()
    is_featured: Boolean()


def load_product(product_id) -> Product:
    product = current_domain.repository_for(Product)._dao.query.filter(id=str(product_id)).all().first
    if product is None:
        raise NotFound("Product not found")
    return product


@storefront.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find_active(command.product_id)
        if product is None:
            raise NotFound("Product not found")

        if command.category_id and str(command.category_id) != str(product.category_id):
            load_category(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock,
            category_id=command.category_id,
            status=command.status,
            colors=decode_json(command.colors),
            sizes=decode_json(command.sizes),
            materials=decode_json(command.materials),
            tags=decode_json(command.tags),
            images=decode_json(command.images),
            weight=command.weight,
            dimensions=decode_dimensions(command.dimensions),
            is_featured=command.is_featured,
        )
        repo.add(product)
        return str(product.id)
