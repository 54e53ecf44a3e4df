"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ConflictException(AppException):
    """Raised when entity conflicts with current state."""

    status_code = 409
    code = "conflict"


class BusinessRuleException(AppException):
    """Raised when business rule validation fails."""

    status_code = 422
    code = "business_rule_violation"


class InvalidUploadException(AppException):
    """Raised when an uploaded file has an unsupported type."""

    status_code = 400
    code = "invalid_upload"


class PayloadTooLargeException(AppException):
    status_code = 413
    code = "payload_too_large"


class PaymentGatewayException(AppException):
    """Raised when the payment provider could not create a payment."""

    status_code = 500
    code = "payment_gateway_error"


class AssistantUnavailableException(AppException):
    """Raised when the generative AI provider fails or answers garbage."""

    status_code = 502
    code = "assistant_unavailable"


class UpstreamRateLimitedException(AppException):
    """Raised when an upstream provider rejects the call for quota reasons."""

    status_code = 429
    code = "upstream_rate_limited"


def _error_body(code: str, message: str) -> dict:
    return {"success": False, "message": message, "error": {"code": code, "message": message}}


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", str(exc.detail)),
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("internal_error", "Some error occured!"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
