"""FastAPI endpoints for hosted checkout: session creation and payment verification.

Both handlers call the payment processor, so they are plain functions and
FastAPI runs them in its threadpool.
"""

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_checkout_bridge, optional_principal
from storefront.api.schemas import CreateSessionRequest
from storefront.checkout.bridge import CheckoutBridge
from storefront.identity.principal import Principal

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/create-session")
def create_session(
    body: CreateSessionRequest,
    principal: Principal | None = Depends(optional_principal),
    bridge: CheckoutBridge = Depends(get_checkout_bridge),
):
    started = bridge.create_session(
        [item.model_dump(by_alias=True) for item in body.cart_items],
        principal=principal,
        guest_email=body.guest_email,
        email=body.email,
    )
    return {
        "success": True,
        "message": "Checkout session created",
        "url": started.url,
        "sessionId": started.session_id,
    }


@router.get("/verify-payment")
def verify_payment(
    session_id: str | None = Query(None),
    bridge: CheckoutBridge = Depends(get_checkout_bridge),
):
    result = bridge.verify_payment(session_id)
    if not result.paid:
        return {
            "success": False,
            "message": "Payment not completed",
            "paymentStatus": result.payment_status,
        }

    return {
        "success": True,
        "message": "Payment verified",
        "paymentStatus": result.payment_status,
        "amount": result.amount,
        "email": result.email,
        "orderId": result.order_id,
        "orderNumber": result.order_number,
    }
