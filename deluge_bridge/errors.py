# File: deluge_bridge/errors.py
"""Custom exceptions for the application."""

from enum import Enum


class AppError(Exception):
    """Base class for application-specific exceptions."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize the exception.

        Args:
            message: The error message.
            status_code: The HTTP status code to return.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidRequestError(AppError):
    """Raised when the client request is invalid (400)."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with 400 Bad Request."""
        super().__init__(message, status_code=400)


class DownloadClientError(AppError):
    """Raised when the download client rejects or fails an operation."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        """Initialize the exception."""
        super().__init__(message, status_code)


class DownloadClientAuthenticationError(DownloadClientError):
    """Raised when the daemon refuses the configured credentials."""


class DownloadClientUnavailableError(DownloadClientError):
    """Raised when the daemon cannot be reached or cannot serve the request."""

    def __init__(self, message: str, status_code: int = 503) -> None:
        """Initialize the exception with 503 Service Unavailable."""
        super().__init__(message, status_code)


class TransportFailure(Enum):
    """Network-layer sub-status of a transport failure."""

    CONNECT_FAILURE = "connect_failure"
    CONNECTION_CLOSED = "connection_closed"
    SECURE_CHANNEL_FAILURE = "secure_channel_failure"
    OTHER = "other"


class DownloadClientTransportError(DownloadClientUnavailableError):
    """Raised when the HTTP transport to the daemon fails."""

    def __init__(self, message: str, failure: TransportFailure = TransportFailure.OTHER) -> None:
        """Initialize the exception.

        Args:
            message: The error message.
            failure: Classification of the network-layer failure.
        """
        super().__init__(message)
        self.failure = failure
