"""Product creation: command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.management import load_category
from storefront.catalogue.product.product import Dimensions, Product
from storefront.domain import storefront
from storefront.shared.errors import Conflict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=100)
    description: String(required=True, max_length=2000)
    price: Float(required=True, min_value=0.0)
    stock: Integer(required=True, min_value=0)
    category_id: Identifier(required=True)
    sku: String(max_length=50)
    status: String(max_length=20)
    colors: Text()  # JSON array of strings
    sizes: Text()
    materials: Text()
    tags: Text()
    images: Text()  # JSON array of {"url", "alt"}
    weight: Float(min_value=0.0)
    dimensions: Text()  # JSON object with length/width/height
    is_featured: Boolean(default=False)
    created_by: Identifier()


def decode_json(raw):
    return json.loads(raw) if raw else None


def decode_dimensions(raw):
    values = decode_json(raw)
    return Dimensions(**values) if values else None


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        load_category(command.category_id)

        if command.sku and repo.find_by_sku(command.sku) is not None:
            raise Conflict("Product SKU already exists", field="sku")

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock,
            category_id=command.category_id,
            sku=command.sku,
            status=command.status,
            colors=decode_json(command.colors),
            sizes=decode_json(command.sizes),
            materials=decode_json(command.materials),
            tags=decode_json(command.tags),
            images=decode_json(command.images),
            weight=command.weight,
            dimensions=decode_dimensions(command.dimensions),
            is_featured=command.is_featured,
            created_by=command.created_by,
        )
        repo.add(product)

        logger.info("product_created", product_id=str(product.id), sku=product.sku)
        return str(product.id)
