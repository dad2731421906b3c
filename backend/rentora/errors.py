"""Domain error taxonomy and the FastAPI handlers that render it.

Services raise :class:`AppError` subclasses at the point a precondition is
violated; routers never catch them. The handlers registered by
:func:`register_exception_handlers` turn every failure into the standard
envelope::

    {"success": false, "error": {"code": "...", "message": "...", "details": ...}}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rentora.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to a stable machine-readable code."""

    code: str = "INTERNAL_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return error


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class ConflictError(AppError):
    code = "DUPLICATE_ENTRY"
    status_code = status.HTTP_409_CONFLICT
    default_message = "A record with this value already exists"


# ---------------------------------------------------------------------------
# Booking lifecycle
# ---------------------------------------------------------------------------


class InvalidDatesError(AppError):
    code = "INVALID_DATES"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Check-out must be after check-in"


class InvalidBookingError(AppError):
    code = "INVALID_BOOKING"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid booking"


class MinStayError(AppError):
    code = "MIN_STAY"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, min_stay_days: int) -> None:
        super().__init__(
            f"Minimum stay is {min_stay_days} days",
            details={"minStayDays": min_stay_days},
        )


class MaxStayError(AppError):
    code = "MAX_STAY"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, max_stay_days: int) -> None:
        super().__init__(
            f"Maximum stay is {max_stay_days} days",
            details={"maxStayDays": max_stay_days},
        )


class NotAvailableError(AppError):
    code = "NOT_AVAILABLE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Property not available for selected dates"


class InvalidStatusError(AppError):
    code = "INVALID_STATUS"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid status for this operation"


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class AlreadyReviewedError(AppError):
    code = "ALREADY_REVIEWED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "You have already reviewed this property"


class NotEligibleError(AppError):
    code = "NOT_ELIGIBLE"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Can only review after staying"


class NotCompletedError(AppError):
    code = "NOT_COMPLETED"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Can only review completed services"


# ---------------------------------------------------------------------------
# Accounts and favorites
# ---------------------------------------------------------------------------


class InvalidPasswordError(AppError):
    code = "INVALID_PASSWORD"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Current password is incorrect"


class AlreadyFavoritedError(AppError):
    code = "ALREADY_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already in favorites"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

_HTTP_STATUS_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error envelope response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_STATUS_CODES.get(exc.status_code, "INTERNAL_ERROR" if exc.status_code >= 500 else "ERROR")
    message = exc.detail if isinstance(exc.detail, str) else code.replace("_", " ").capitalize()
    details = exc.detail if not isinstance(exc.detail, str) else None
    return error_response(exc.status_code, code, message, details, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Validation failed", details)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(status.HTTP_409_CONFLICT, ConflictError.code, ConflictError.default_message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = "Internal server error" if settings.is_production else str(exc) or "Internal server error"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
