"""HTTP transport implementations for sync and async clients."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass(frozen=True, slots=True)
class BytesBody:
    """Raw bytes request body with explicit content type."""

    data: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class MultipartBody:
    """multipart/form-data body: plain text fields plus file parts.

    ``files`` entries are ``(field_name, (filename, content, content_type))``
    in the order they should appear on the wire.
    """

    fields: dict[str, str] = field(default_factory=dict)
    files: Sequence[tuple[str, tuple[str, bytes, str]]] = ()


RequestBody = BytesBody | MultipartBody | None


def _request_kwargs(body: RequestBody, headers: dict[str, str] | None) -> dict[str, Any]:
    request_headers = dict(headers or {})
    kwargs: dict[str, Any] = {}
    if isinstance(body, BytesBody):
        kwargs["content"] = body.data
        request_headers["content-type"] = body.content_type
    elif isinstance(body, MultipartBody):
        # httpx sets the multipart content-type with its boundary
        kwargs["data"] = body.fields or None
        kwargs["files"] = list(body.files)
    kwargs["headers"] = request_headers
    return kwargs


class BaseTransport(abc.ABC):
    """Abstract transport with async interface."""

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        """Send an HTTP request and return the response.

        With ``stream=True`` the body is left unread; use ``read`` and
        ``close_response``.
        """
        ...

    @abc.abstractmethod
    async def read(self, response: httpx.Response) -> bytes:
        """Read the remaining body of a streamed response."""
        ...

    @abc.abstractmethod
    async def close_response(self, response: httpx.Response) -> None: ...


class BlockingTransport(BaseTransport):
    """
    Synchronous HTTP transport using httpx.Client.

    Methods are declared async but don't actually await anything,
    allowing them to be executed via iter_coroutine().
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        request = self._client.build_request(
            method,
            url,
            params=params or None,
            **_request_kwargs(body, headers),
        )
        return self._client.send(request, stream=stream)

    async def read(self, response: httpx.Response) -> bytes:
        return response.read()

    async def close_response(self, response: httpx.Response) -> None:
        response.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()


class AsyncTransport(BaseTransport):
    """Asynchronous HTTP transport using httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        body: RequestBody = None,
        headers: dict[str, str] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        request = self._client.build_request(
            method,
            url,
            params=params or None,
            **_request_kwargs(body, headers),
        )
        return await self._client.send(request, stream=stream)

    async def read(self, response: httpx.Response) -> bytes:
        return await response.aread()

    async def close_response(self, response: httpx.Response) -> None:
        await response.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


__all__ = [
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "BytesBody",
    "MultipartBody",
    "RequestBody",
]
