"""Storefront FastAPI application factory.

Collaborators (payment processor, image storage, identity) are built from
``Settings`` unless the caller passes its own, which is how tests swap in
the fakes.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.cart import router as cart_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.checkout import router as checkout_router
from storefront.api.errors import register_error_handlers
from storefront.api.orders import router as order_router
from storefront.api.reviews import router as review_router
from storefront.api.uploads import router as upload_router
from storefront.domain import storefront
from storefront.identity import IdentityProvider, build_identity_provider
from storefront.payments.gateway import PaymentGateway, build_gateway
from storefront.settings import Settings
from storefront.storage import ImageStorage, build_image_storage
from storefront.utils.logging import add_context, clear_context


def create_app(
    settings: Settings | None = None,
    payment_gateway: PaymentGateway | None = None,
    image_storage: ImageStorage | None = None,
    identity_provider: IdentityProvider | None = None,
) -> FastAPI:
    """Build the API. The ``storefront`` domain must already be initialized."""
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, carts, hosted checkout, orders and reviews",
    )
    app.state.settings = settings
    app.state.payment_gateway = payment_gateway or build_gateway(settings)
    app.state.image_storage = image_storage or build_image_storage(settings)
    app.state.identity_provider = identity_provider or build_identity_provider(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        with storefront.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    app.include_router(upload_router)
    app.include_router(category_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(review_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app
