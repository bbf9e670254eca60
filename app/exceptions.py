# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the auth API.
# Every failure leaves the API as the same JSON envelope:
#   {"success": false, "message": "...", "code": "...", "errors": [...]}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class StorefrontAuthException(Exception):
    """
    Base exception for the storefront auth API.

    All custom exceptions inherit from this class and are converted to the
    failure envelope by `storefront_exception_handler`.
    """

    def __init__(
        self,
        message: str,
        code: str = "AUTH_ERROR",
        status_code: int = 500,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.errors:
            result["errors"] = self.errors
        return result


# =============================================================================
# Validation
# =============================================================================

def format_validation_errors(
    exc: ValidationError | RequestValidationError,
    messages: dict[str, str] | None = None,
) -> list[dict[str, Any]]:
    """
    Flatten pydantic errors into [{"field", "message", "code"}].

    `messages` maps a field name to the human-readable text shown for any
    failure on that field; a missing field always reads "<Field> is required".
    """
    messages = messages or {}
    formatted = []
    for error in exc.errors():
        # RequestValidationError locations start with "body"
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        code = error.get("type", "value_error")

        if code == "missing":
            label = field.replace("_", " ")
            message = f"{label[:1].upper()}{label[1:]} is required"
        else:
            message = messages.get(field, error.get("msg", "Invalid value"))

        formatted.append({"field": field, "message": message, "code": code})
    return formatted


class PayloadValidationError(StorefrontAuthException):
    """Raised when a request body does not match the expected shape."""

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(
            message="Validation failed",
            code="VALIDATION_ERROR",
            status_code=400,
            errors=errors,
        )


# =============================================================================
# Authentication / Transport
# =============================================================================

class AuthenticationFailedError(StorefrontAuthException):
    """Raised when a login cannot be completed."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
        )


class RegistrationFailedError(StorefrontAuthException):
    """Raised when an account cannot be created."""

    def __init__(self, message: str = "Registration failed"):
        super().__init__(
            message=message,
            code="REGISTRATION_FAILED",
            status_code=500,
        )


class UpstreamRejectedError(StorefrontAuthException):
    """Raised when the upstream backend answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(
            message=message,
            code="UPSTREAM_REJECTED",
            status_code=status_code,
        )


class UpstreamConnectionError(StorefrontAuthException):
    """Raised when the upstream backend cannot be reached or times out."""

    def __init__(self, url: str, error: str):
        super().__init__(
            message="Failed to connect to authentication server",
            code="UPSTREAM_UNREACHABLE",
            status_code=500,
        )
        self.url = url
        self.error = error


# =============================================================================
# Exception Handlers
# =============================================================================

async def storefront_exception_handler(
    request: Request,
    exc: StorefrontAuthException
) -> JSONResponse:
    """Convert StorefrontAuthException to the JSON failure envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors.

    Answers 400 with the same envelope the auth handlers use.
    """
    return JSONResponse(
        status_code=400,
        content=PayloadValidationError(format_validation_errors(exc)).to_dict()
    )


async def unexpected_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle anything the routes did not convert themselves."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
