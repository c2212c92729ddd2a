"""Product soft delete: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.details import load_product
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ProductLifecycleHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        if not product.is_active:
            return str(product.id)

        product.deactivate()
        current_domain.repository_for(Product).add(product)

        logger.info("product_deactivated", product_id=str(product.id))
        return str(product.id)
