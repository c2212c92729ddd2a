"""Error taxonomy shared by every storefront operation.

Domain and application code raise these; the API layer maps each class to an
HTTP status. Validation-flavoured errors extend Protean's ``ValidationError``
so that they carry the usual ``{"field": ["message"]}`` payload and roll back
the surrounding unit of work like any other invariant failure.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


def _messages(message: str | dict, field: str) -> dict:
    if isinstance(message, dict):
        return message
    return {field: [message]}


def first_message(messages, with_field: bool = False) -> str:
    """Flatten a Protean ``messages`` payload into one human-readable line."""
    if isinstance(messages, dict):
        for field, value in messages.items():
            if isinstance(value, list | tuple):
                value = value[0] if value else None
            if value:
                if with_field and field != "_entity":
                    return f"{field}: {value}"
                return str(value)
    return str(messages)


class StorefrontError(Exception):
    """Base class for errors that are not field validation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(ValidationError):
    def __init__(self, message: str | dict, field: str = "_entity") -> None:
        super().__init__(_messages(message, field))


class NotFound(ObjectNotFoundError):
    def __init__(self, message: str | dict, field: str = "_entity") -> None:
        super().__init__(_messages(message, field))


class Conflict(ValidationError):
    def __init__(self, message: str | dict, field: str = "_entity") -> None:
        super().__init__(_messages(message, field))


class Unavailable(ValidationError):
    """The request is well formed but cannot be satisfied right now."""

    def __init__(self, message: str | dict, field: str = "_entity") -> None:
        super().__init__(_messages(message, field))


class InsufficientStock(Unavailable):
    def __init__(self, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock. Only {available} items available",
            field="quantity",
        )
        self.available = available
        self.requested = requested


class Unauthorized(StorefrontError):
    pass


class Forbidden(StorefrontError):
    pass


class UpstreamError(StorefrontError):
    """A remote collaborator (payment processor, image storage) failed."""
