"""
Shared error handling for the Recipe Access Layer.
"""

from typing import Any, Dict, List, Optional

from opentelemetry import trace
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """A single user-correctable problem."""

    code: str
    description: str


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    errors: List[ErrorDetail] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for Access Layer services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None,
                 errors: Optional[List[ErrorDetail]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        self.errors = errors or []
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            errors=self.errors,
            details=self.details,
        )


class ConfigurationError(AccessLayerException):
    """Startup configuration is unusable; the service must not start."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ValidationError(AccessLayerException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None,
                 errors: Optional[List[ErrorDetail]] = None, code: str = "VALIDATION_ERROR"):
        super().__init__(code, message, details, errors)


class DuplicateUserError(ValidationError):
    """A user with the same normalized username already exists."""

    def __init__(self, username: str):
        super().__init__(
            f"Username '{username}' is already taken.",
            errors=[ErrorDetail(code="DuplicateUserName",
                                description=f"Username '{username}' is already taken.")],
            code="DUPLICATE_USER",
        )


class AuthenticationError(AccessLayerException):
    """Bad username or password."""

    status_code = 401

    def __init__(self, message: str = "Invalid username or password", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class NotFoundError(AccessLayerException):
    """Requested resource does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class TokenError(AccessLayerException):
    """Base class for credential verification failures.

    The concrete subclass is for logs and tests only; callers over HTTP always
    see a generic ``Unauthorized``.
    """

    status_code = 401


class TokenMalformed(TokenError):
    def __init__(self, message: str = "Token is malformed"):
        super().__init__("TOKEN_MALFORMED", message)


class TokenSignatureInvalid(TokenError):
    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__("TOKEN_SIGNATURE_INVALID", message)


class TokenExpired(TokenError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__("TOKEN_EXPIRED", message)


class Unauthorized(AccessLayerException):
    """Request carried a credential that was rejected."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__("UNAUTHORIZED", message)


class Unauthenticated(Unauthorized):
    """Request carried no bearer credential at all."""

    def __init__(self):
        super().__init__()
        self.reason = "UNAUTHENTICATED"
