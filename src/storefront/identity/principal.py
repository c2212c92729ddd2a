"""Identity port.

Bearer credentials are issued elsewhere; the storefront only asks a provider
to turn one into a principal, or into ``None`` when it is not acceptable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    id: str
    email: str | None = None
    role: str = "user"
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class IdentityProvider(ABC):
    @abstractmethod
    def resolve(self, token: str) -> Principal | None:
        """Return the principal a bearer token stands for, if any."""
        ...
