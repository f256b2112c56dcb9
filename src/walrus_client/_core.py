"""Core request/response logic shared by the blocking and async clients."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterable, Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from ._http import (
    BaseTransport,
    BytesBody,
    ClientConfig,
    MultipartBody,
    RequestBody,
)
from .errors import (
    ApiError,
    BlobNotFoundError,
    DecodeError,
    EncodeError,
    InvalidParameterError,
    TransportError,
    WalrusError,
)
from .types import (
    BlobDescriptor,
    QuiltFileInput,
    QuiltPatchMetadata,
    QuiltStoreOutcome,
    StoreOptions,
    StoreOutcome,
    _QuiltStoreWire,
    _StoreResultWire,
)
from .utils import debug, to_payload, validate_path_segment

METADATA_FIELD = "_metadata"
FILE_CONTENT_TYPE = "application/octet-stream"


def _parse_error_message(status_code: int, body: bytes) -> tuple[str, Any | None]:
    """Build an ``HTTP <status>: <detail>`` message from an error body."""
    parsed: Any | None = None
    message = f"HTTP {status_code}"
    try:
        parsed = json.loads(body) if body else None
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            message = f"{message}: {err['message']}"
        elif isinstance(err, str):
            message = f"{message}: {err}"
        elif isinstance(parsed.get("message"), str):
            message = f"{message}: {parsed['message']}"
    elif body:
        text = body.decode("utf-8", errors="replace").strip()
        if text:
            snippet = text if len(text) <= 500 else text[:500] + "..."
            message = f"{message}: {snippet}"

    return message, parsed


def map_api_error(response: httpx.Response, body: bytes) -> ApiError:
    message, data = _parse_error_message(response.status_code, body)
    error_cls = BlobNotFoundError if response.status_code == 404 else ApiError
    return error_cls(response.status_code, message, data=data, response=response)


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def decode_json_object(body: bytes, what: str) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise DecodeError(f"Failed to parse {what}: response body is not valid JSON") from exc
    if not isinstance(data, dict):
        raise DecodeError(
            f"Failed to parse {what}: expected a JSON object, got {type(data).__name__}"
        )
    return data


def decode_store_outcome(data: dict[str, Any]) -> StoreOutcome:
    """Decode a store response body into its single variant."""
    try:
        return _StoreResultWire.model_validate(data).outcome
    except ValidationError as exc:
        raise DecodeError(f"Failed to parse store result: {exc}") from exc


def decode_quilt_store_outcome(data: dict[str, Any]) -> QuiltStoreOutcome:
    try:
        return _QuiltStoreWire.model_validate(data).to_outcome()
    except ValidationError as exc:
        raise DecodeError(f"Failed to parse quilt store result: {exc}") from exc


def _require_header(headers: httpx.Headers, name: str) -> str:
    value = headers.get(name)
    if value is None:
        raise DecodeError(f"Missing header: {name}")
    return value


def parse_blob_metadata(headers: httpx.Headers) -> BlobDescriptor:
    """Read the three required metadata headers; all or nothing."""
    raw_length = _require_header(headers, "content-length").strip()
    if not (raw_length.isascii() and raw_length.isdigit()):
        raise DecodeError(f"Failed to parse header content-length: {raw_length!r}")
    content_type = _require_header(headers, "content-type")
    etag = _require_header(headers, "etag")
    return BlobDescriptor(
        content_length=int(raw_length),
        content_type=content_type,
        etag=etag,
    )


def build_store_options(
    options: StoreOptions | None,
    *,
    epochs: int | None = None,
    deletable: bool | None = None,
    permanent: bool | None = None,
    send_object_to: str | None = None,
) -> StoreOptions:
    """Merge keyword overrides into ``options``; ``None`` keywords are ignored."""
    overrides = {
        key: value
        for key, value in (
            ("epochs", epochs),
            ("deletable", deletable),
            ("permanent", permanent),
            ("send_object_to", send_object_to),
        )
        if value is not None
    }
    if options is None:
        return StoreOptions(**overrides)
    if not isinstance(options, StoreOptions):
        raise InvalidParameterError(
            f"options must be a StoreOptions instance, got {type(options).__name__}"
        )
    return dataclasses.replace(options, **overrides) if overrides else options


def normalize_quilt_files(
    files: Mapping[str, Any] | Iterable[QuiltFileInput | tuple[str, Any]],
) -> list[QuiltFileInput]:
    if isinstance(files, Mapping):
        items: list[Any] = [QuiltFileInput(identifier=k, data=v) for k, v in files.items()]
    else:
        items = list(files)

    normalized: list[QuiltFileInput] = []
    seen: set[str] = set()
    for item in items:
        if isinstance(item, QuiltFileInput):
            entry = item
        elif isinstance(item, tuple) and len(item) == 2:
            entry = QuiltFileInput(identifier=item[0], data=item[1])
        else:
            raise InvalidParameterError(
                "quilt files must be QuiltFileInput instances or (identifier, data) pairs"
            )

        identifier = entry.identifier
        if not isinstance(identifier, str) or not identifier:
            raise InvalidParameterError("quilt file identifier must be a non-empty string")
        if identifier == METADATA_FIELD:
            raise InvalidParameterError(f"quilt file identifier {METADATA_FIELD!r} is reserved")
        if identifier in seen:
            raise InvalidParameterError(f"duplicate quilt file identifier: {identifier!r}")
        seen.add(identifier)

        normalized.append(
            QuiltFileInput(
                identifier=identifier,
                data=to_payload(entry.data, f"data for {identifier!r}"),
                tags=entry.tags,
            )
        )

    if not normalized:
        raise InvalidParameterError("a quilt needs at least one file")
    return normalized


def collect_quilt_metadata(
    files: list[QuiltFileInput],
    metadata: Iterable[QuiltPatchMetadata | Mapping[str, Any]] | None,
) -> list[QuiltPatchMetadata] | None:
    """Explicit metadata wins; otherwise use the tags carried by the files.

    Returns ``None`` when there is no metadata at all, which is different from
    an explicitly empty list.
    """
    try:
        if metadata is not None:
            return [
                m if isinstance(m, QuiltPatchMetadata) else QuiltPatchMetadata.model_validate(m)
                for m in metadata
            ]
        tagged = [
            QuiltPatchMetadata(identifier=f.identifier, tags=f.tags)
            for f in files
            if f.tags is not None
        ]
    except (ValidationError, TypeError) as exc:
        raise EncodeError(f"Failed to serialize metadata: {exc}") from exc
    return tagged or None


def encode_quilt_metadata(metadata: list[QuiltPatchMetadata]) -> str:
    try:
        return json.dumps([m.model_dump(mode="json", by_alias=True) for m in metadata])
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Failed to serialize metadata: {exc}") from exc


def build_quilt_body(
    files: list[QuiltFileInput],
    metadata: list[QuiltPatchMetadata] | None,
) -> MultipartBody:
    parts = [(f.identifier, (f.identifier, f.data, FILE_CONTENT_TYPE)) for f in files]
    fields: dict[str, str] = {}
    if metadata is not None:
        fields[METADATA_FIELD] = encode_quilt_metadata(metadata)
    return MultipartBody(fields=fields, files=parts)


class _BaseWalrusClient:
    """
    Base class containing the Walrus publisher/aggregator operations.

    All methods are async and use ``_transport`` for HTTP requests. The
    blocking subclass supplies a transport that never suspends.
    """

    _transport: BaseTransport
    _config: ClientConfig
    _closed: bool = False

    @property
    def aggregator_url(self) -> str:
        return self._config.aggregator_url

    @property
    def publisher_url(self) -> str:
        return self._config.publisher_url

    def _ensure_open(self) -> None:
        if self._closed:
            raise WalrusError("Client is closed")

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        body: RequestBody = None,
        stream: bool = False,
    ) -> httpx.Response:
        self._ensure_open()
        debug(f"{method} {url}", params or "")
        try:
            return await self._transport.send(method, url, params=params, body=body, stream=stream)
        except httpx.InvalidURL as exc:
            raise InvalidParameterError(f"Failed to build URL: {exc}") from exc
        except httpx.DecodingError as exc:
            raise DecodeError(f"Failed to decode response body: {exc}") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        what: str,
        params: dict[str, str] | None = None,
        body: RequestBody = None,
    ) -> dict[str, Any]:
        resp = await self._send(method, url, params=params, body=body)
        if not is_success(resp):
            error = map_api_error(resp, resp.content)
            debug(f"{method} {url} failed", error.message)
            raise error
        return decode_json_object(resp.content, what)

    async def _request_bytes(self, url: str, *, what: str) -> bytes:
        resp = await self._send("GET", url, stream=True)
        try:
            if not is_success(resp):
                try:
                    error_body = await self._transport.read(resp)
                except httpx.HTTPError:
                    error_body = b""
                error = map_api_error(resp, error_body)
                debug(f"GET {url} failed", error.message)
                raise error
            try:
                return await self._transport.read(resp)
            except httpx.HTTPError as exc:
                raise DecodeError(f"Failed to read {what} bytes: {exc}") from exc
        finally:
            await self._transport.close_response(resp)

    async def _store_blob(
        self,
        data: bytes | bytearray | memoryview | str,
        options: StoreOptions | None = None,
        *,
        epochs: int | None = None,
        deletable: bool | None = None,
        permanent: bool | None = None,
        send_object_to: str | None = None,
    ) -> StoreOutcome:
        resolved = build_store_options(
            options,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )
        payload = to_payload(data)
        result = await self._request_json(
            "PUT",
            self._config.publisher("v1/blobs"),
            what="store result",
            params=resolved.to_params(),
            body=BytesBody(payload),
        )
        return decode_store_outcome(result)

    async def _read_blob_by_id(self, blob_id: str) -> bytes:
        segment = validate_path_segment(blob_id, "blob_id")
        return await self._request_bytes(
            self._config.aggregator(f"v1/blobs/{segment}"),
            what="blob",
        )

    async def _read_blob_by_object_id(self, object_id: str) -> bytes:
        segment = validate_path_segment(object_id, "object_id")
        return await self._request_bytes(
            self._config.aggregator(f"v1/blobs/by-object-id/{segment}"),
            what="blob",
        )

    async def _store_quilt(
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
        resolved = build_store_options(
            options,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )
        quilt_files = normalize_quilt_files(files)
        body = build_quilt_body(quilt_files, collect_quilt_metadata(quilt_files, metadata))
        result = await self._request_json(
            "PUT",
            self._config.publisher("v1/quilts"),
            what="quilt store result",
            params=resolved.to_params(),
            body=body,
        )
        return decode_quilt_store_outcome(result)

    async def _read_quilt_file_by_patch_id(self, patch_id: str) -> bytes:
        segment = validate_path_segment(patch_id, "patch_id")
        return await self._request_bytes(
            self._config.aggregator(f"v1/blobs/by-quilt-patch-id/{segment}"),
            what="quilt file",
        )

    async def _read_quilt_file_by_quilt_and_identifier(
        self,
        quilt_id: str,
        identifier: str,
    ) -> bytes:
        quilt_segment = validate_path_segment(quilt_id, "quilt_id")
        identifier_segment = validate_path_segment(identifier, "identifier")
        return await self._request_bytes(
            self._config.aggregator(f"v1/blobs/by-quilt-id/{quilt_segment}/{identifier_segment}"),
            what="quilt file",
        )

    async def _get_blob_metadata(self, blob_id: str) -> BlobDescriptor:
        segment = validate_path_segment(blob_id, "blob_id")
        url = self._config.aggregator(f"v1/blobs/{segment}")
        resp = await self._send("HEAD", url)
        if not is_success(resp):
            error = map_api_error(resp, resp.content)
            debug(f"HEAD {url} failed", error.message)
            raise error
        return parse_blob_metadata(resp.headers)


__all__ = [
    "map_api_error",
    "decode_json_object",
    "decode_store_outcome",
    "decode_quilt_store_outcome",
    "parse_blob_metadata",
    "build_store_options",
    "normalize_quilt_files",
    "collect_quilt_metadata",
    "encode_quilt_metadata",
    "build_quilt_body",
]
