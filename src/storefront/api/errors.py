"""Map the storefront error taxonomy onto HTTP responses.

Every error body has the same envelope as a successful one:
``{"success": false, "message": "..."}``, plus ``errors`` with the field
messages when there are any.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.shared.errors import (
    Conflict,
    Forbidden,
    InvalidArgument,
    NotFound,
    StorefrontError,
    Unauthorized,
    Unavailable,
    UpstreamError,
    first_message,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    InvalidArgument: 400,
    ValidationError: 400,
    NotFound: 404,
    ObjectNotFoundError: 404,
    Conflict: 409,
    Unavailable: 422,
    Unauthorized: 401,
    Forbidden: 403,
    UpstreamError: 502,
}


def envelope(status_code: int, message: str, errors=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _status_for(exc: Exception) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


async def protean_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = _status_for(exc)
    messages = getattr(exc, "messages", None)
    if status_code == 404:
        logger.info("not_found", path=request.url.path)
    # Bare Protean validation messages ("is required") need their field name
    with_field = type(exc) is ValidationError
    return envelope(
        status_code,
        first_message(messages, with_field=with_field),
        messages if isinstance(messages, dict) else None,
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("upstream_failure", path=request.url.path, error=exc.message)
    return envelope(status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(location) or "_request", []).append(error.get("msg"))
    message = next(iter(errors.values()))[0] if errors else "Invalid request"
    return envelope(400, message, errors)


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's defaults, then the storefront's envelope on top."""
    register_exception_handlers(app)

    for exc_class in (ValidationError, ObjectNotFoundError, InvalidArgument, NotFound, Conflict, Unavailable):
        app.add_exception_handler(exc_class, protean_error_handler)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
