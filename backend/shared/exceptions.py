"""
Base exception classes for the RentHub backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code.
"""

from typing import Optional, Any


class RentHubError(Exception):
    """
    Base exception for all RentHub errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(RentHubError):
    """Resource not found."""

    status_code = 404


class ValidationError(RentHubError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(RentHubError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(RentHubError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ExternalServiceError(RentHubError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
