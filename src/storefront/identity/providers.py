from jose import JWTError, jwt

from storefront.identity.principal import IdentityProvider, Principal
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StaticIdentityProvider(IdentityProvider):
    """Maps fixed tokens to principals. Used in development and tests."""

    def __init__(self, principals: dict[str, Principal] | None = None) -> None:
        self.principals = dict(principals or {})

    def register(self, token: str, principal: Principal) -> None:
        self.principals[token] = principal

    def resolve(self, token: str) -> Principal | None:
        return self.principals.get(token)


class JWTIdentityProvider(IdentityProvider):
    """Verifies HMAC-signed tokens; issuing them is the auth service's job."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self.secret = secret
        self.algorithm = algorithm

    def resolve(self, token: str) -> Principal | None:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.info("jwt_rejected", error=str(exc))
            return None

        user_id = payload.get("id") or payload.get("sub")
        if not user_id:
            return None
        return Principal(
            id=str(user_id),
            email=payload.get("email"),
            role=payload.get("role", "user"),
            name=payload.get("name"),
        )
