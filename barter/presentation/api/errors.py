"""Error envelope for the REST API.

Every failure leaves the API as

    {"success": false, "error": <family>, "type": <exception class>,
     "message": ..., "details": ...}

``error`` is the coarse family a client switches on (ConflictError,
InvalidStateTransition, ...); ``type`` names the concrete domain exception.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from barter.domain.shared import (
    AggregateNotFound,
    ConflictError,
    DomainException,
    ForbiddenActionError,
    InvalidStateTransition,
    TransactionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first
DOMAIN_STATUS: tuple[tuple[type[DomainException], int], ...] = (
    (TransactionError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateTransition, status.HTTP_409_CONFLICT),
    (AggregateNotFound, status.HTTP_404_NOT_FOUND),
    (ForbiddenActionError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def classify(exc: DomainException) -> tuple[int, str]:
    """(HTTP status, error family) of a domain exception."""
    for exc_type, code in DOMAIN_STATUS:
        if isinstance(exc, exc_type):
            return code, exc_type.__name__
    return status.HTTP_400_BAD_REQUEST, type(exc).__name__


def envelope(
    code: int,
    error: str,
    message: str,
    *,
    type_: str | None = None,
    details=None,
    headers=None,
) -> JSONResponse:
    content = {"success": False, "error": error, "message": message}
    if type_ is not None:
        content["type"] = type_
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=code, content=content, headers=headers)


async def handle_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
    code, family = classify(exc)
    log = logger.error if code >= 500 else logger.info
    log(
        "api.domain_error",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error": exc.message,
            "status_code": code,
        },
    )
    return envelope(
        code,
        family,
        exc.message,
        type_=type(exc).__name__,
        details={key: str(value) for key, value in exc.context.items()},
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """401 from the auth dependency, unknown routes, wrong methods."""
    return envelope(
        exc.status_code,
        "Unauthorized" if exc.status_code == 401 else "HTTPError",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query parameters (422)."""
    errors = exc.errors()
    logger.warning("api.validation_error", extra={"path": request.url.path, "errors": errors})
    return envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationError",
        "Request validation failed",
        details=[{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api.unhandled_exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, handle_domain_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
