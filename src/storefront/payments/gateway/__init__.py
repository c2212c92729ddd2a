"""Payment gateway factory.

The app factory builds one gateway at start-up and hands it to the checkout
bridge: Stripe when ``STRIPE_SECRET_KEY`` is configured, the in-memory fake
otherwise.
"""

from storefront.payments.gateway.fake_adapter import FakeCheckoutGateway
from storefront.payments.gateway.port import PaymentGateway
from storefront.settings import Settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_gateway(settings: Settings) -> PaymentGateway:
    if settings.stripe_secret_key:
        from storefront.payments.gateway.stripe_adapter import StripeGateway

        return StripeGateway(api_key=settings.stripe_secret_key)

    logger.warning("payment_gateway_fake", reason="STRIPE_SECRET_KEY not set")
    return FakeCheckoutGateway()
