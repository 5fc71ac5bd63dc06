from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    PROVIDER_ERROR = "provider_error"
    NETWORK = "network"
    UNKNOWN = "unknown"


class LookupFailure(RuntimeError):
    """Base lookup error. Subclasses pin the :class:`ErrorKind`."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.kind.value)
        self.message = message


class InvalidInput(LookupFailure):
    """Raised before any request is sent when the query cannot be built."""

    kind = ErrorKind.INVALID_INPUT


class PlaceNotFound(LookupFailure):
    """Raised when the provider could not resolve the requested place."""

    kind = ErrorKind.NOT_FOUND


class ProviderError(LookupFailure):
    """Raised when the provider answered with a structured failure."""

    kind = ErrorKind.PROVIDER_ERROR


class NetworkError(LookupFailure):
    """Raised when no response reached the caller."""

    kind = ErrorKind.NETWORK


class UnknownLookupError(LookupFailure):
    kind = ErrorKind.UNKNOWN


class GeolocationError(RuntimeError):
    """Raised by geolocation sources on denial or failure."""


class ConfigurationError(RuntimeError):
    """Raised when an environment setting is present but malformed."""


__all__ = [
    "ErrorKind",
    "LookupFailure",
    "InvalidInput",
    "PlaceNotFound",
    "ProviderError",
    "NetworkError",
    "UnknownLookupError",
    "GeolocationError",
    "ConfigurationError",
]
