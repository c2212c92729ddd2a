"""FastAPI dependencies resolving collaborators and the calling principal.

Collaborators are built once by ``create_app`` and parked on ``app.state``.
"""

from fastapi import Depends, Header, Request

from storefront.checkout.bridge import CheckoutBridge
from storefront.identity.principal import IdentityProvider, Principal
from storefront.payments.gateway.port import PaymentGateway
from storefront.settings import Settings
from storefront.shared.errors import Forbidden, Unauthorized
from storefront.storage.port import ImageStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_checkout_bridge(
    gateway: PaymentGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> CheckoutBridge:
    return CheckoutBridge(gateway, settings)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def optional_principal(
    authorization: str | None = Header(None),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal | None:
    """The caller's principal, or ``None`` for guests and unusable tokens."""
    token = _bearer_token(authorization)
    return identity.resolve(token) if token else None


def current_principal(
    authorization: str | None = Header(None),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal:
    token = _bearer_token(authorization)
    if token is None:
        raise Unauthorized("Not authorized, no token")

    principal = identity.resolve(token)
    if principal is None:
        raise Unauthorized("Not authorized, token failed")
    return principal


def admin_principal(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden(f"User role {principal.role} is not authorized to access this route")
    return principal
