"""Shared HTTP infrastructure for Walrus clients."""

from .clients import create_headers_async_client, create_headers_client
from .config import (
    AGGREGATOR_URL_ENV,
    DEFAULT_TIMEOUT,
    PUBLISHER_URL_ENV,
    ClientConfig,
    normalize_base_url,
    validate_base_url,
)
from .iter_coroutine import iter_coroutine
from .transport import (
    AsyncTransport,
    BaseTransport,
    BlockingTransport,
    BytesBody,
    MultipartBody,
    RequestBody,
)

__all__ = [
    "AGGREGATOR_URL_ENV",
    "DEFAULT_TIMEOUT",
    "PUBLISHER_URL_ENV",
    "ClientConfig",
    "normalize_base_url",
    "validate_base_url",
    "iter_coroutine",
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "BytesBody",
    "MultipartBody",
    "RequestBody",
    "create_headers_client",
    "create_headers_async_client",
]
