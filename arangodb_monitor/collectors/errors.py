"""Error types raised while collecting statistics from an ArangoDB endpoint."""

from typing import Optional


class ArangoDBError(Exception):
    """Base exception for all per-endpoint collection errors."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Prefix the message with the endpoint it concerns, if known."""
        if self.url:
            return f"{self.url}: {self.message}"
        return self.message


class ConfigurationError(ArangoDBError):
    """
    Raised when a configured endpoint URL cannot be used.

    Examples:
    - Control characters in the URL
    - Missing scheme or host
    - Scheme other than http/https
    """

    pass


class ConnectivityError(ArangoDBError):
    """
    Raised when the endpoint cannot be reached.

    Examples:
    - Connection refused
    - Request timeout
    - DNS resolution failure
    """

    pass


class DecodeError(ArangoDBError):
    """Raised when a response body is not the JSON shape we expect."""

    pass


class ResponseStatusError(ArangoDBError):
    """Raised when the endpoint answers with a non-2xx HTTP status."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message, url)


class MalformedStatisticsError(ArangoDBError):
    """Raised when decoded statistics cannot be normalized."""

    pass


class CollectionError(ArangoDBError):
    """Wraps an unexpected failure so it still names the endpoint."""

    pass
