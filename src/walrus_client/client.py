"""Walrus API client classes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from ._core import _BaseWalrusClient
from ._http import (
    AsyncTransport,
    BlockingTransport,
    ClientConfig,
    create_headers_async_client,
    create_headers_client,
    iter_coroutine,
)
from .types import (
    BlobDescriptor,
    QuiltFileInput,
    QuiltPatchMetadata,
    QuiltStoreOutcome,
    StoreOptions,
    StoreOutcome,
)
from .utils import USER_AGENT


def _default_headers(config: ClientConfig) -> dict[str, str]:
    return {"user-agent": USER_AGENT, **config.headers}


class WalrusClient(_BaseWalrusClient):
    """Synchronous client for the Walrus publisher and aggregator.

    Every method runs the same code path as :class:`AsyncWalrusClient` and
    blocks the calling thread for one HTTP round trip.

    Args:
        aggregator_url: Base URL of the aggregator. Falls back to
            ``WALRUS_AGGREGATOR_URL``.
        publisher_url: Base URL of the publisher. Falls back to
            ``WALRUS_PUBLISHER_URL``.
        timeout: Request timeout in seconds.
        headers: Static headers sent with every request.
        client: Optional preconfigured ``httpx.Client`` to use. It is closed
            together with this client.

    Raises:
        ConfigError: If either URL is missing or malformed.
    """

    def __init__(
        self,
        aggregator_url: str | None = None,
        publisher_url: str | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = ClientConfig.from_values(
            aggregator_url, publisher_url, timeout=timeout, headers=headers
        )
        http_client = create_headers_client(
            _default_headers(self._config), self._config.timeout, client=client
        )
        self._transport = BlockingTransport(http_client)
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._transport.close()

    def __enter__(self) -> WalrusClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def store_blob(
        self,
        data: bytes | bytearray | memoryview | str,
        options: StoreOptions | None = None,
        *,
        epochs: int | None = None,
        deletable: bool | None = None,
        permanent: bool | None = None,
        send_object_to: str | None = None,
    ) -> StoreOutcome:
        """Store a blob through the publisher.

        Returns :class:`NewlyCreated` or :class:`AlreadyCertified`.
        """
        return iter_coroutine(
            self._store_blob(
                data,
                options,
                epochs=epochs,
                deletable=deletable,
                permanent=permanent,
                send_object_to=send_object_to,
            )
        )

    def read_blob_by_id(self, blob_id: str) -> bytes:
        """Read a blob's bytes by blob ID."""
        return iter_coroutine(self._read_blob_by_id(blob_id))

    def read_blob_by_object_id(self, object_id: str) -> bytes:
        """Read a blob's bytes by the ID of its on-chain blob object."""
        return iter_coroutine(self._read_blob_by_object_id(object_id))

    def store_quilt(
        self,
        files: Mapping[str, Any] | Iterable[QuiltFileInput | tuple[str, Any]],
        metadata: Iterable[QuiltPatchMetadata | Mapping[str, Any]] | None = None,
        options: StoreOptions | None = None,
        *,
        epochs: int | None = None,
        deletable: bool | None = None,
        permanent: bool | None = None,
        send_object_to: str | None = None,
    ) -> QuiltStoreOutcome:
        """Store several files as one quilt."""
        return iter_coroutine(
            self._store_quilt(
                files,
                metadata,
                options,
                epochs=epochs,
                deletable=deletable,
                permanent=permanent,
                send_object_to=send_object_to,
            )
        )

    def read_quilt_file_by_patch_id(self, patch_id: str) -> bytes:
        return iter_coroutine(self._read_quilt_file_by_patch_id(patch_id))

    def read_quilt_file_by_quilt_and_identifier(self, quilt_id: str, identifier: str) -> bytes:
        return iter_coroutine(self._read_quilt_file_by_quilt_and_identifier(quilt_id, identifier))

    def get_blob_metadata(self, blob_id: str) -> BlobDescriptor:
        """Fetch size, content type and ETag of a blob without downloading it."""
        return iter_coroutine(self._get_blob_metadata(blob_id))


class AsyncWalrusClient(_BaseWalrusClient):
    """Asynchronous client for the Walrus publisher and aggregator.

    Takes the same arguments as :class:`WalrusClient`; ``client`` is an
    ``httpx.AsyncClient``. Safe to share between concurrent tasks.
    """

    def __init__(
        self,
        aggregator_url: str | None = None,
        publisher_url: str | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = ClientConfig.from_values(
            aggregator_url, publisher_url, timeout=timeout, headers=headers
        )
        http_client = create_headers_async_client(
            _default_headers(self._config), self._config.timeout, client=client
        )
        self._transport = AsyncTransport(http_client)
        self._closed = False

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._transport.aclose()

    async def __aenter__(self) -> AsyncWalrusClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def store_blob(
        self,
        data: bytes | bytearray | memoryview | str,
        options: StoreOptions | None = None,
        *,
        epochs: int | None = None,
        deletable: bool | None = None,
        permanent: bool | None = None,
        send_object_to: str | None = None,
    ) -> StoreOutcome:
        """Store a blob through the publisher.

        Returns :class:`NewlyCreated` or :class:`AlreadyCertified`.
        """
        return await self._store_blob(
            data,
            options,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )

    async def read_blob_by_id(self, blob_id: str) -> bytes:
        """Read a blob's bytes by blob ID."""
        return await self._read_blob_by_id(blob_id)

    async def read_blob_by_object_id(self, object_id: str) -> bytes:
        """Read a blob's bytes by the ID of its on-chain blob object."""
        return await self._read_blob_by_object_id(object_id)

    async def store_quilt(
        self,
        files: Mapping[str, Any] | Iterable[QuiltFileInput | tuple[str, Any]],
        metadata: Iterable[QuiltPatchMetadata | Mapping[str, Any]] | None = None,
        options: StoreOptions | None = None,
        *,
        epochs: int | None = None,
        deletable: bool | None = None,
        permanent: bool | None = None,
        send_object_to: str | None = None,
    ) -> QuiltStoreOutcome:
        """Store several files as one quilt."""
        return await self._store_quilt(
            files,
            metadata,
            options,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )

    async def read_quilt_file_by_patch_id(self, patch_id: str) -> bytes:
        return await self._read_quilt_file_by_patch_id(patch_id)

    async def read_quilt_file_by_quilt_and_identifier(
        self, quilt_id: str, identifier: str
    ) -> bytes:
        return await self._read_quilt_file_by_quilt_and_identifier(quilt_id, identifier)

    async def get_blob_metadata(self, blob_id: str) -> BlobDescriptor:
        """Fetch size, content type and ETag of a blob without downloading it."""
        return await self._get_blob_metadata(blob_id)


__all__ = ["WalrusClient", "AsyncWalrusClient"]
