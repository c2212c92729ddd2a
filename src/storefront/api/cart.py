"""FastAPI endpoints for the signed-in shopper's cart."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_principal
from storefront.api.schemas import CartItemRequest
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartItem
from storefront.cart.management import ClearCart
from storefront.cart.views import cart_for
from storefront.identity.principal import Principal

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("")
async def get_cart(principal: Principal = Depends(current_principal)):
    return {"success": True, "data": cart_for(principal.id)}


@router.post("/add")
async def add_to_cart(body: CartItemRequest, principal: Principal = Depends(current_principal)):
    cart = current_domain.process(
        AddToCart(
            user_id=principal.id,
            product_id=body.product_id,
            quantity=body.quantity,
            color=body.selected_color or "",
            size=body.selected_size or "",
        ),
        asynchronous=False,
    )
    return {"success": True, "message": "Item added to cart", "data": cart}


@router.put("/update")
async def update_cart_item(body: CartItemRequest, principal: Principal = Depends(current_principal)):
    cart = current_domain.process(
        UpdateCartItem(
            user_id=principal.id,
            product_id=body.product_id,
            quantity=body.quantity,
            color=body.selected_color or "",
            size=body.selected_size or "",
        ),
        asynchronous=False,
    )
    return {"success": True, "message": "Cart updated", "data": cart}


@router.delete("/remove/{product_id}")
async def remove_from_cart(
    product_id: str,
    selected_color: str | None = Query(None, alias="selectedColor"),
    selected_size: str | None = Query(None, alias="selectedSize"),
    principal: Principal = Depends(current_principal),
):
    cart = current_domain.process(
        RemoveFromCart(
            user_id=principal.id,
            product_id=product_id,
            color=selected_color or "",
            size=selected_size or "",
        ),
        asynchronous=False,
    )
    return {"success": True, "message": "Item removed from cart", "data": cart}


@router.delete("/clear")
async def clear_cart(principal: Principal = Depends(current_principal)):
    cart = current_domain.process(ClearCart(user_id=principal.id), asynchronous=False)
    return {"success": True, "message": "Cart cleared", "data": cart}
