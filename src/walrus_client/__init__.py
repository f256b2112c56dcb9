"""Python client for the Walrus publisher and aggregator HTTP APIs."""

from .client import AsyncWalrusClient, WalrusClient
from .errors import (
    ApiError,
    BlobNotFoundError,
    ConfigError,
    DecodeError,
    EncodeError,
    InvalidParameterError,
    TransportError,
    WalrusError,
)
from .types import (
    AlreadyCertified,
    BlobDescriptor,
    Event,
    NewlyCreated,
    ObjectDescriptor,
    QuiltFileInput,
    QuiltPatchMetadata,
    QuiltStoreOutcome,
    RegisterFromScratch,
    ResourceOperation,
    StorageInfo,
    StoredQuiltBlob,
    StoreOptions,
    StoreOutcome,
)
from .utils import VERSION as __version__

__all__ = [
    "WalrusClient",
    "AsyncWalrusClient",
    "WalrusError",
    "ConfigError",
    "TransportError",
    "ApiError",
    "BlobNotFoundError",
    "DecodeError",
    "EncodeError",
    "InvalidParameterError",
    "AlreadyCertified",
    "BlobDescriptor",
    "Event",
    "NewlyCreated",
    "ObjectDescriptor",
    "QuiltFileInput",
    "QuiltPatchMetadata",
    "QuiltStoreOutcome",
    "RegisterFromScratch",
    "ResourceOperation",
    "StorageInfo",
    "StoredQuiltBlob",
    "StoreOptions",
    "StoreOutcome",
    "__version__",
]
