"""Exceptions raised by the Walrus client."""

from __future__ import annotations

from typing import Any

import httpx


class WalrusError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(WalrusError):
    """An aggregator or publisher base URL is missing or malformed."""


class TransportError(WalrusError):
    """The request never produced an HTTP response (connect, timeout, protocol)."""


class ApiError(WalrusError):
    """The service answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        data: Any | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.data = data
        self.response = response


class BlobNotFoundError(ApiError):
    """The aggregator does not know the requested blob, object or quilt patch."""


class DecodeError(WalrusError):
    """A response body or header could not be interpreted."""


class EncodeError(WalrusError):
    """Quilt metadata could not be serialized."""


class InvalidParameterError(WalrusError):
    """Caller input was rejected before any request was sent."""


__all__ = [
    "WalrusError",
    "ConfigError",
    "TransportError",
    "ApiError",
    "BlobNotFoundError",
    "DecodeError",
    "EncodeError",
    "InvalidParameterError",
]
