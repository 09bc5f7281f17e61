"""
Error types raised by the delivery API client.

The link resolver itself never raises; these cover lookups that come back
empty, failed HTTP calls and unusable configuration.
"""

from typing import Any, Dict, Optional


class DeliveryAPIError(Exception):
    """Base class for all client errors."""


class NotFoundError(DeliveryAPIError):
    """A single-entity lookup returned no match."""

    def __init__(self, id: Optional[str], environment: Optional[str], space: Optional[str]):
        super().__init__("The resource could not be found.")
        self.sys: Dict[str, str] = {"type": "Error", "id": "NotFound"}
        self.details: Dict[str, Any] = {
            "type": "Entry",
            "id": id,
            "environment": environment,
            "space": space,
        }


class TransportError(DeliveryAPIError):
    """
    A request failed, either with a non-2xx status or at the network level.

    ``body`` holds the parsed JSON error document returned by the API when
    there was one, otherwise the raw response text (or None for network
    failures, where ``status_code`` is None as well).
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Any = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.url = url

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} (HTTP {self.status_code})"


class ConfigurationError(DeliveryAPIError, ValueError):
    """Client configuration is missing something a request needs."""
