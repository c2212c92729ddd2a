"""Hydrated cart views returned by every cart operation."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product.product import Product
from storefront.shared.money import round_cents, to_decimal


def _product_summary(product: Product | None):
    if product is None:
        return None
    return {
        "id": str(product.id),
        "name": product.name,
        "price": product.price,
        "images": [{"url": image.url, "alt": image.alt} for image in product.ordered_images],
        "stock": product.stock,
        "status": product.status,
        "isActive": product.is_active,
    }


def hydrate_cart(cart: Cart) -> dict:
    """Return the cart with each line's product populated, plus totals."""
    repo = current_domain.repository_for(Product)
    lines = []
    subtotal = to_decimal(0)
    for item in cart.items:
        product = repo._dao.query.filter(id=str(item.product_id)).all().first
        subtotal += to_decimal(item.price) * item.quantity
        lines.append(
            {
                "id": str(item.id),
                "product": _product_summary(product) or {"id": str(item.product_id)},
                "quantity": item.quantity,
                "price": item.price,
                "selectedColor": item.color or None,
                "selectedSize": item.size or None,
            }
        )

    return {
        "id": str(cart.id),
        "user": str(cart.user_id),
        "items": lines,
        "itemCount": cart.item_count,
        "subtotal": round_cents(subtotal),
        "updatedAt": cart.updated_at.isoformat() if cart.updated_at else None,
    }


def cart_for(user_id) -> dict:
    """Get-or-create the user's cart and return it hydrated."""
    repo = current_domain.repository_for(Cart)
    return hydrate_cart(repo.get_or_create(user_id))
