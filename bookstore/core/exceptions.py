"""
Custom Exceptions for the Book Store Application

Every failure the core can report is one of the classes below. Services
carry them unchanged inside a ServiceResult and the API layer turns them
into HTTP responses using ``status_code``.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CONFLICT = "CONFLICT"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    DATABASE_ERROR = "DATABASE_ERROR"
    INVALID_STATE = "INVALID_STATE"


class AuthErrorKind(str, Enum):
    """Reason an authentication step rejected a request."""
    INVALID_CREDENTIALS = "invalid_credentials"
    MISSING_TOKEN = "missing_token"
    BAD_SIGNATURE = "bad_signature"
    WRONG_ISSUER = "wrong_issuer"
    WRONG_AUDIENCE = "wrong_audience"
    EXPIRED = "expired"
    MALFORMED = "malformed"


class BookStoreError(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "code": self.error_code.value,
                "message": self.message,
                "details": self.details,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BookStoreError):
    """Malformed or missing input. Raised before the store is touched."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, status_code=400)
        self.field = field


class NotFoundError(BookStoreError):
    """Raised when a referenced identifier does not exist."""

    def __init__(self, resource_type: str, identifier: Any):
        super().__init__(
            f"{resource_type} with identifier '{identifier}' not found",
            ErrorCode.RESOURCE_NOT_FOUND,
            {"resource_type": resource_type, "identifier": identifier},
            status_code=404,
        )
        self.resource_type = resource_type
        self.identifier = identifier


class ConflictError(BookStoreError):
    """Raised when an operation would violate a relation invariant."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFLICT, details, status_code=409)


class AuthError(BookStoreError):
    """Credential or token failure; ``kind`` tells which check failed."""

    _messages = {
        AuthErrorKind.INVALID_CREDENTIALS: "Invalid email or password",
        AuthErrorKind.MISSING_TOKEN: "Bearer token required",
        AuthErrorKind.BAD_SIGNATURE: "Token signature is invalid",
        AuthErrorKind.WRONG_ISSUER: "Token issuer is not trusted",
        AuthErrorKind.WRONG_AUDIENCE: "Token audience does not match",
        AuthErrorKind.EXPIRED: "Token has expired",
        AuthErrorKind.MALFORMED: "Token is missing required claims",
    }

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None):
        super().__init__(
            message or self._messages[kind],
            ErrorCode.AUTHENTICATION_FAILED,
            {"reason": kind.value},
            status_code=401,
        )
        self.kind = kind


class ForbiddenError(BookStoreError):
    """Authenticated principal lacks the role a route requires."""

    def __init__(self, required_role: str):
        super().__init__(
            f"Role '{required_role}' is required",
            ErrorCode.INSUFFICIENT_PERMISSIONS,
            {"required_role": required_role},
            status_code=403,
        )
        self.required_role = required_role


class StoreError(BookStoreError):
    """Underlying transactional failure. The transaction is already rolled back."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {"error_type": type(original_error).__name__} if original_error else {}
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, status_code=503)
        self.original_error = original_error


class StateError(BookStoreError):
    """Unit of work used in the wrong lifecycle state."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_STATE, status_code=500)
