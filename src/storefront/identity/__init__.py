from storefront.identity.principal import IdentityProvider, Principal
from storefront.identity.providers import JWTIdentityProvider, StaticIdentityProvider
from storefront.settings import Settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["IdentityProvider", "Principal", "build_identity_provider"]


def build_identity_provider(settings: Settings) -> IdentityProvider:
    if settings.jwt_secret:
        return JWTIdentityProvider(settings.jwt_secret, settings.jwt_algorithm)

    logger.warning("identity_provider_static", reason="JWT_SECRET not set, every bearer token is rejected")
    return StaticIdentityProvider()
