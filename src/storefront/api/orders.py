"""FastAPI endpoints for order history and order administration."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import admin_principal, current_principal
from storefront.api.schemas import UpdateOrderStatusRequest
from storefront.api.serializers import order_to_dict, paginate
from storefront.identity.principal import Principal
from storefront.order.order import Order
from storefront.order.status import CancelOrder, UpdateOrderStatus, load_order
from storefront.shared.errors import Forbidden

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("")
async def my_orders(principal: Principal = Depends(current_principal)):
    orders = current_domain.repository_for(Order).for_user(principal.id)
    return {"success": True, "count": len(orders), "data": [order_to_dict(order) for order in orders]}


@router.get("/admin/all")
async def all_orders(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: Principal = Depends(admin_principal),
):
    orders = current_domain.repository_for(Order).all_orders(status)
    page_items, pagination = paginate(orders, page, limit)
    return {"success": True, "data": [order_to_dict(order) for order in page_items], "pagination": pagination}


@router.get("/{order_id}")
async def get_order(order_id: str, principal: Principal = Depends(current_principal)):
    order = load_order(order_id)
    if not (principal.is_admin or order.is_owned_by(principal.id)):
        raise Forbidden("Not authorized to view this order")
    return {"success": True, "data": order_to_dict(order)}


@router.put("/{order_id}/cancel")
async def cancel_order(order_id: str, principal: Principal = Depends(current_principal)):
    current_domain.process(
        CancelOrder(order_id=order_id, actor_id=principal.id, actor_is_admin=principal.is_admin),
        asynchronous=False,
    )
    return {"success": True, "message": "Order cancelled successfully", "data": order_to_dict(load_order(order_id))}


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    _: Principal = Depends(admin_principal),
):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=body.status, tracking_number=body.tracking_number),
        asynchronous=False,
    )
    return {"success": True, "message": "Order status updated", "data": order_to_dict(load_order(order_id))}
