"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.views import hydrate_cart
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.errors import NotFound, Unavailable


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)
    color = String(max_length=50)
    size = String(max_length=50)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    color = String(max_length=50)
    size = String(max_length=50)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(max_length=50)
    size = String(max_length=50)


def _live_product(product_id) -> Product:
    product = current_domain.repository_for(Product).find_active(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = _live_product(command.product_id)
        if not product.is_purchasable:
            raise Unavailable("Product is not available")

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(user_id=command.user_id)
        cart.add_item(
            product_id=str(product.id),
            quantity=command.quantity,
            price=product.price,
            stock=product.stock,
            color=command.color,
            size=command.size,
        )
        repo.add(cart)
        return hydrate_cart(cart)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(user_id=command.user_id)

        # An inactive or missing product has no stock to offer
        product = current_domain.repository_for(Product).find_active(command.product_id)
        cart.update_item_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
            stock=product.stock if product is not None else 0,
            color=command.color,
            size=command.size,
        )
        repo.add(cart)
        return hydrate_cart(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        if cart.remove_item(command.product_id, command.color, command.size):
            repo.add(cart)
        return hydrate_cart(cart)
