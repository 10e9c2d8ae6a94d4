"""
Custom exception hierarchy for the img2latex application.

Every error carries a short user-facing ``message``; the controller surfaces
that message verbatim and keeps the session usable.
"""

from typing import Optional


class Img2LatexError(Exception):
    """Base exception for all img2latex related errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


# Upload related exceptions
class ImageValidationError(Img2LatexError):
    """Raised when an upload is missing, of the wrong type, or too large."""
    pass


class ImageReadError(Img2LatexError):
    """Raised when an image cannot be read or encoded."""
    pass


# API related exceptions
class APIError(Img2LatexError):
    """Base exception for API-related errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class CredentialError(APIError):
    """Raised when the API rejects the credential (HTTP 401 or 403)."""
    pass


class RateLimitError(APIError):
    """Raised when the API reports rate limiting (HTTP 429)."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = 429,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, details, status_code)
        self.retry_after = retry_after


class APIRequestError(APIError):
    """Raised for any other non-success HTTP status."""
    pass


class TransportError(APIError):
    """Raised when the API cannot be reached."""
    pass


class ProtocolError(APIError):
    """Raised when a success response does not carry the expected text."""
    pass


# Configuration exceptions
class ConfigurationError(Img2LatexError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration values are invalid."""
    pass


# Clipboard exceptions
class ClipboardError(Img2LatexError):
    """Raised when text cannot be placed on the system clipboard."""
    pass
