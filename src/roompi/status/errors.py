"""Exception classes for status endpoint interactions.

This module defines a hierarchy of exception classes for handling
the error conditions met while talking to the RoomPi status API.
"""

from __future__ import annotations

from typing import Final, Optional

# Human-readable explanations for common HTTP errors with an empty body
HTTP_ERROR_MAP: Final = {
    401: "Invalid or missing credentials",
    403: "Access denied",
    404: "Status endpoint not found",
    500: "Status server internal error",
    502: "Bad gateway",
    503: "Service unavailable",
    504: "Gateway timeout",
}


class StatusAPIError(Exception):
    """Error during a status API request or response parsing.

    Carries a numeric code (HTTP status, or 0 when no response was
    received) and a human-readable message.
    """

    def __init__(self, code: int, message: str) -> None:
        """Initialize the exception.

        Args:
            code: HTTP status code or 0 for client-side failures
            message: Human-readable error message
        """
        super().__init__(f"[{code}] {message}")
        self.code: int = code
        self.message: str = message

    @property
    def is_client_error(self) -> bool:
        """Check if this is a client-side error (4xx).

        Returns:
            True for 400-499 status codes
        """
        return 400 <= self.code < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a server-side error (5xx).

        Returns:
            True for 500-599 status codes
        """
        return self.code >= 500

    @property
    def description(self) -> str:
        """Text suitable for showing to the user."""
        return self.message


class InvalidURLError(StatusAPIError):
    """Raised when no request URL can be built from the configured base."""

    def __init__(self, url: str = "") -> None:
        super().__init__(0, "Invalid service API address.")
        self.url = url


class InvalidResponseError(StatusAPIError):
    """Raised when the transport yields something that is not an HTTP response."""

    def __init__(self, original_error: Optional[Exception] = None) -> None:
        super().__init__(0, "Unexpected server response.")
        self.original_error = original_error


class HTTPStatusError(StatusAPIError):
    """Raised for any status code outside 200-299.

    The raw response body is kept because the PHP backend reports most
    problems as plain text.
    """

    def __init__(self, code: int, body: Optional[str] = None) -> None:
        self.body: Optional[str] = body
        super().__init__(code, body or HTTP_ERROR_MAP.get(code, "HTTP error"))

    @property
    def description(self) -> str:
        if self.body:
            return f"Server returned an error ({self.code}): {self.body}"
        return f"Server returned an error ({self.code})."

    @classmethod
    def from_status(cls, code: int, body: Optional[str] = None) -> HTTPStatusError:
        """Create the most specific error for a status code.

        Args:
            code: HTTP status code
            body: Raw response text, if any

        Returns:
            AuthenticationError, NotFoundError, ServerError or HTTPStatusError
        """
        body = (body or "").strip() or None
        if code in (401, 403):
            return AuthenticationError(code, body)
        if code == 404:
            return NotFoundError(code, body)
        if code >= 500:
            return ServerError(code, body)
        return cls(code, body)


class AuthenticationError(HTTPStatusError):
    """Raised when HTTP Basic authentication is rejected."""

    pass


class NotFoundError(HTTPStatusError):
    """Raised when the endpoint does not exist."""

    pass


class ServerError(HTTPStatusError):
    """Raised for 5xx server errors."""

    pass


class NetworkError(StatusAPIError):
    """Raised when a network issue prevents API communication."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize with network error details.

        Args:
            message: Description of the network error, as reported by the transport
            original_error: The original exception that was caught
        """
        super().__init__(0, message)
        self.original_error = original_error


class ParseError(StatusAPIError):
    """Raised when a required part of the payload cannot be decoded."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize with parsing error details.

        Args:
            message: Description of the parsing error
            original_error: The original exception that was caught
        """
        super().__init__(0, message)
        self.original_error = original_error

    @property
    def description(self) -> str:
        return f"Could not read the server response: {self.message}"
