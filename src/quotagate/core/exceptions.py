"""
Custom exceptions for QuotaGate service.

Provides structured error handling with appropriate HTTP status codes
and error details for API responses.
"""

from typing import Any, Dict, Optional


class QuotaGateException(Exception):
    """Base exception for QuotaGate service."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class Unauthenticated(QuotaGateException):
    """Raised when the session carries no usable credential."""

    def __init__(self, message: str = "Unauthorized: Missing API key in cookies.") -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="unauthenticated",
        )


class InvalidCredential(QuotaGateException):
    """Raised when a credential is present but unreadable, rejected or exhausted."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="invalid_credential",
            details=details,
        )


class VerificationUnavailable(QuotaGateException):
    """Raised when the key-management backend could not answer a verification."""

    def __init__(self, message: str = "Unable to verify API key, please retry later.") -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="verification_unavailable",
        )


class InternalError(QuotaGateException):
    """Raised when image generation fails after a successful authorization."""

    def __init__(
        self,
        message: str = "Internal server error: Unable to generate the image.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=500,
            error_code="internal_error",
            details=details,
        )


class TransportFailure(QuotaGateException):
    """Raised when an outbound call to a backend could not complete."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="transport_failure",
            details=details,
        )


class UpstreamEmptyResult(QuotaGateException):
    """Raised when a backend answered without a usable payload."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="upstream_empty_result",
            details=details,
        )
