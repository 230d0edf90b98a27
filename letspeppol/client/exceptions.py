"""
LetsPeppol SDK Exceptions

Defines exception hierarchy for LetsPeppol API errors. Classification
(network / client / server) is derived from the status code, so it holds
whichever subclass was raised.
"""

from typing import Optional, Dict, Any


class LetsPeppolError(Exception):
    """Base exception for all LetsPeppol SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_data: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
        method: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.endpoint = endpoint
        self.method = method

    def __str__(self) -> str:
        return self.message

    @property
    def is_network_error(self) -> bool:
        """Request never produced an HTTP response."""
        return self.status_code == 0

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_retryable(self) -> bool:
        """Whether a caller-side retry may succeed."""
        return self.is_network_error or self.is_server_error or self.status_code == 429

    def get_error_report(self) -> Dict[str, Any]:
        """Structured error information for logging or caller-driven retry."""
        cause = self.__cause__
        return {
            'message': self.message,
            'status_code': self.status_code,
            'endpoint': self.endpoint,
            'method': self.method,
            'is_network_error': self.is_network_error,
            'is_client_error': self.is_client_error,
            'is_server_error': self.is_server_error,
            'response_data': self.response_data,
            'previous_exception': type(cause).__name__ if cause else None,
        }


class ApiError(LetsPeppolError):
    """Raised for non-2xx responses, malformed 2xx bodies and network failures."""


class AuthenticationError(LetsPeppolError):
    """Raised when authentication with LetsPeppol fails."""

    def __init__(
        self,
        message: str = "Authentication failure",
        status_code: int = 401,
        response_data: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
        method: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            response_data=response_data,
            endpoint=endpoint,
            method=method,
        )


class ServerError(LetsPeppolError):
    """Raised on HTTP 500 before the response reaches the resource clients."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        response_data: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
        method: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            response_data=response_data,
            endpoint=endpoint,
            method=method,
        )


class ConfigurationError(LetsPeppolError):
    """Raised for invalid client options or an unusable log file path."""
