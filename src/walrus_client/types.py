from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .errors import DecodeError, InvalidParameterError


class _WireModel(BaseModel):
    """Base for JSON shapes exchanged with the publisher/aggregator."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StorageInfo(_WireModel):
    """Storage resource backing a blob object."""

    id: str
    start_epoch: int
    end_epoch: int
    storage_size: int


class ObjectDescriptor(_WireModel):
    """On-chain blob object created by a store."""

    id: str
    registered_epoch: int
    blob_id: str
    size: int
    encoding_type: str
    certified_epoch: int | None = None
    storage: StorageInfo
    deletable: bool


class RegisterFromScratch(_WireModel):
    encoded_length: int
    epochs_ahead: int


class ResourceOperation(_WireModel):
    register_from_scratch: RegisterFromScratch | None = None


class Event(_WireModel):
    tx_digest: str
    event_seq: str


class NewlyCreated(_WireModel):
    """The blob was registered and certified by this store."""

    blob_object: ObjectDescriptor
    resource_operation: ResourceOperation
    cost: int

    @property
    def blob_id(self) -> str:
        return self.blob_object.blob_id


class AlreadyCertified(_WireModel):
    """The blob was already certified by another writer; nothing was paid."""

    blob_id: str
    event: Event
    end_epoch: int


StoreOutcome = Union[NewlyCreated, AlreadyCertified]


class _StoreResultWire(_WireModel):
    """Wire envelope of a store response: exactly one key is set."""

    newly_created: NewlyCreated | None = None
    already_certified: AlreadyCertified | None = None

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> _StoreResultWire:
        present = [v for v in (self.newly_created, self.already_certified) if v is not None]
        if len(present) != 1:
            raise ValueError(
                "expected exactly one of 'newlyCreated' or 'alreadyCertified', "
                f"got {len(present)}"
            )
        return self

    @property
    def outcome(self) -> StoreOutcome:
        if self.newly_created is not None:
            return self.newly_created
        if self.already_certified is not None:
            return self.already_certified
        raise DecodeError("store result carries neither newlyCreated nor alreadyCertified")


class StoredQuiltBlob(_WireModel):
    identifier: str
    quilt_patch_id: str


class QuiltStoreOutcome(BaseModel):
    """Result of storing a quilt.

    ``stored_quilt_blobs`` keeps the order the publisher returned. It is not
    guaranteed to match the order of the submitted files, so look patches up
    by identifier with :meth:`patch_id_for` or :attr:`patch_ids`.
    """

    blob_store_result: StoreOutcome
    stored_quilt_blobs: list[StoredQuiltBlob]

    @property
    def patch_ids(self) -> dict[str, str]:
        return {blob.identifier: blob.quilt_patch_id for blob in self.stored_quilt_blobs}

    def patch_id_for(self, identifier: str) -> str:
        for blob in self.stored_quilt_blobs:
            if blob.identifier == identifier:
                return blob.quilt_patch_id
        raise KeyError(identifier)


class _QuiltStoreWire(_WireModel):
    blob_store_result: _StoreResultWire
    stored_quilt_blobs: list[StoredQuiltBlob]

    def to_outcome(self) -> QuiltStoreOutcome:
        return QuiltStoreOutcome(
            blob_store_result=self.blob_store_result.outcome,
            stored_quilt_blobs=self.stored_quilt_blobs,
        )


class QuiltPatchMetadata(_WireModel):
    """Tags attached to one file of a quilt."""

    identifier: str
    tags: dict[str, str] = Field(default_factory=dict)


@dataclass(slots=True)
class QuiltFileInput:
    identifier: str
    data: bytes
    tags: dict[str, str] | None = None


@dataclass(slots=True)
class BlobDescriptor:
    """Blob facts taken from the headers of a HEAD request."""

    content_length: int
    content_type: str
    etag: str


@dataclass(frozen=True, slots=True)
class StoreOptions:
    """Optional query parameters of a blob or quilt store.

    ``None`` means "omit from the request"; ``False`` is sent as ``false``.
    """

    epochs: int | None = None
    deletable: bool | None = None
    permanent: bool | None = None
    send_object_to: str | None = None

    def __post_init__(self) -> None:
        if self.epochs is not None:
            if isinstance(self.epochs, bool) or not isinstance(self.epochs, int):
                raise InvalidParameterError("epochs must be a positive integer")
            if self.epochs <= 0:
                raise InvalidParameterError(f"epochs must be a positive integer, got {self.epochs}")
        for name in ("deletable", "permanent"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, bool):
                raise InvalidParameterError(f"{name} must be a bool")
        if self.send_object_to is not None and not self.send_object_to:
            raise InvalidParameterError("send_object_to must not be empty")

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.epochs is not None:
            params["epochs"] = str(self.epochs)
        if self.deletable is not None:
            params["deletable"] = "true" if self.deletable else "false"
        if self.permanent is not None:
            params["permanent"] = "true" if self.permanent else "false"
        if self.send_object_to is not None:
            params["send_object_to"] = self.send_object_to
        return params


__all__ = [
    "StorageInfo",
    "ObjectDescriptor",
    "RegisterFromScratch",
    "ResourceOperation",
    "Event",
    "NewlyCreated",
    "AlreadyCertified",
    "StoreOutcome",
    "StoredQuiltBlob",
    "QuiltStoreOutcome",
    "QuiltPatchMetadata",
    "QuiltFileInput",
    "BlobDescriptor",
    "StoreOptions",
]
