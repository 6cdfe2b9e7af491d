import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from soundmap.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, extra: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"error": message}
    if error_type:
        content["type"] = error_type
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    extra = None
    # InvalidCredentialsError must be checked before its AuthenticationError base
    if isinstance(exc, InvalidCredentialsError):
        status_code = 400
        error_type = "invalid_credentials"
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, RateLimitError):
        status_code = 429
        error_type = "rate_limit_exceeded"
        extra = {"reset_at": exc.reset_at.isoformat()}
    elif isinstance(exc, ConflictError):
        status_code = 400
        error_type = "conflict"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    elif isinstance(exc, InternalError):
        status_code = 500
        error_type = "internal_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, extra=extra)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Turn FastAPI's 422 request validation failures into the 400 error shape."""
    message = "Invalid request"
    if isinstance(exc, RequestValidationError) and exc.errors():
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else str(first.get("msg", message))
    return create_json_error_response(status_code=400, message=message, error_type="validation_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(status_code=500, message="An unexpected error occurred.", error_type="internal_server_error")
