"""
Domain exceptions and standardized error responses.

Every failure the service reports to a client is a ReflectError subclass.
The exception handler registered by `register_exception_handlers` turns it
into the standard error body:

    {
        "error": {
            "code": "DATABASE_ERROR",
            "message": "Could not save entry",
            "details": {"operation": "upsert"},
            "correlation_id": "abc123"
        }
    }

Usage:
    from reflectai.shared.errors import RepositoryError

    raise RepositoryError("Could not save entry", details={"operation": "upsert"})
"""

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger("Reflect.Errors")


class ErrorCode(str, Enum):
    """Error codes reported to clients."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ErrorDetail(BaseModel):
    """Structured error detail model."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""
    error: ErrorDetail


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class ReflectError(Exception):
    """Base class for errors surfaced to the user."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class AuthError(ReflectError):
    """Bad credentials, signup rejection or auth transport failure."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class ValidationError(ReflectError):
    """Client-side validation failure; no backend call was made."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class NotFoundError(ReflectError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class RepositoryError(ReflectError):
    """Read, write or delete failure against the entry store."""

    code = ErrorCode.DATABASE_ERROR
    status_code = 502


class AnalysisError(ReflectError):
    """Missing credential, AI transport failure or unusable AI response."""

    code = ErrorCode.EXTERNAL_SERVICE_ERROR
    status_code = 502

    @classmethod
    def missing_credential(cls) -> "AnalysisError":
        return cls(
            "AI API key is missing. Please set ANTHROPIC_API_KEY.",
            code=ErrorCode.CONFIGURATION_ERROR,
            status_code=503,
        )


class ConfigurationError(ReflectError):
    code = ErrorCode.CONFIGURATION_ERROR
    status_code = 503


# =============================================================================
# RESPONSES
# =============================================================================

def get_correlation_id(request: Optional[Request] = None) -> Optional[str]:
    """
    Extract correlation ID from request state.

    Args:
        request: FastAPI request object (optional)

    Returns:
        Correlation ID string or None if not available
    """
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a standardized JSON error response.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with standardized error format
    """
    error_detail = ErrorDetail(
        code=code.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": error_detail.model_dump(exclude_none=True)},
    )


async def reflect_error_handler(request: Request, exc: ReflectError) -> JSONResponse:
    """Render a ReflectError with the standard error body."""
    if exc.status_code >= 500:
        logger.warning("%s: %s", exc.code.value, exc.message)
    return error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=get_correlation_id(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the ReflectError handler to the application."""
    app.add_exception_handler(ReflectError, reflect_error_handler)
