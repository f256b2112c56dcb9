"""Store-then-read round trips against an in-memory fake publisher/aggregator."""

import hashlib
import re

import httpx
import pytest
import respx

from walrus_client import AsyncWalrusClient, NewlyCreated, WalrusClient

AGGREGATOR = "https://aggregator.example.com/"
PUBLISHER = "https://publisher.example.com/"


def _blob_id(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:43]


def _newly_created(blob_id: str, size: int) -> dict:
    return {
        "newlyCreated": {
            "blobObject": {
                "id": f"0x{blob_id}",
                "registeredEpoch": 1,
                "blobId": blob_id,
                "size": size,
                "encodingType": "RS2",
                "certifiedEpoch": 1,
                "storage": {"id": "0x1", "startEpoch": 1, "endEpoch": 2, "storageSize": size},
                "deletable": False,
            },
            "resourceOperation": {
                "registerFromScratch": {"encodedLength": size, "epochsAhead": 1}
            },
            "cost": 1,
        }
    }


def _multipart_files(request: httpx.Request) -> list[tuple[str, bytes]]:
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    files = []
    for chunk in request.content.split(b"--" + boundary):
        chunk = chunk.strip(b"\r\n")
        if not chunk or chunk == b"--":
            continue
        head, _, value = chunk.partition(b"\r\n\r\n")
        name = re.search(rb'; name="([^"]*)"', head).group(1).decode()
        if name != "_metadata":
            files.append((name, value))
    return files


class FakeWalrus:
    """Just enough of the publisher and aggregator to store and read back."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.patches: dict[str, bytes] = {}

    def store_blob(self, request: httpx.Request) -> httpx.Response:
        data = request.content
        blob_id = _blob_id(data)
        self.blobs[blob_id] = data
        return httpx.Response(200, json=_newly_created(blob_id, len(data)))

    def read_blob(self, request: httpx.Request, blob_id: str) -> httpx.Response:
        if blob_id not in self.blobs:
            return httpx.Response(404, json={"error": {"code": 404, "message": "not found"}})
        return httpx.Response(200, content=self.blobs[blob_id])

    def store_quilt(self, request: httpx.Request) -> httpx.Response:
        files = _multipart_files(request)
        quilt_id = _blob_id(b"".join(data for _, data in files))
        stored = []
        for index, (identifier, data) in enumerate(files):
            patch_id = f"{quilt_id}{index:04d}"
            self.patches[patch_id] = data
            stored.append({"identifier": identifier, "quiltPatchId": patch_id})
        # the service gives no ordering guarantee for patches
        stored.reverse()
        return httpx.Response(
            200,
            json={
                "blobStoreResult": _newly_created(quilt_id, sum(len(d) for _, d in files)),
                "storedQuiltBlobs": stored,
            },
        )

    def read_patch(self, request: httpx.Request, patch_id: str) -> httpx.Response:
        if patch_id not in self.patches:
            return httpx.Response(404)
        return httpx.Response(200, content=self.patches[patch_id])

    def install(self, router: respx.Router) -> None:
        router.put(f"{PUBLISHER}v1/blobs").mock(side_effect=self.store_blob)
        router.put(f"{PUBLISHER}v1/quilts").mock(side_effect=self.store_quilt)
        router.get(
            url__regex=rf"^{re.escape(AGGREGATOR)}v1/blobs/by-quilt-patch-id/(?P<patch_id>[^/]+)$"
        ).mock(side_effect=self.read_patch)
        router.get(url__regex=rf"^{re.escape(AGGREGATOR)}v1/blobs/(?P<blob_id>[^/]+)$").mock(
            side_effect=self.read_blob
        )


@pytest.fixture
def fake_walrus():
    fake = FakeWalrus()
    with respx.mock(assert_all_called=False) as router:
        fake.install(router)
        yield fake


class TestRoundTrip:
    def test_store_then_read_blob_sync(self, mock_env_clear, fake_walrus):
        payload = b"some string from the Python SDK"

        with WalrusClient(AGGREGATOR, PUBLISHER) as client:
            outcome = client.store_blob(payload, epochs=1)
            assert isinstance(outcome, NewlyCreated)
            assert client.read_blob_by_id(outcome.blob_id) == payload

    @pytest.mark.asyncio
    async def test_store_then_read_blob_async(self, mock_env_clear, fake_walrus):
        payload = bytes(range(256)) * 4

        async with AsyncWalrusClient(AGGREGATOR, PUBLISHER) as client:
            outcome = await client.store_blob(payload)
            assert await client.read_blob_by_id(outcome.blob_id) == payload

    def test_store_then_read_quilt_sync(self, mock_env_clear, fake_walrus):
        with WalrusClient(AGGREGATOR, PUBLISHER) as client:
            result = client.store_quilt([("a.txt", b"X content"), ("b.txt", b"Y content")])

            # correlate by identifier, never by list position
            assert [b.identifier for b in result.stored_quilt_blobs] == ["b.txt", "a.txt"]
            assert client.read_quilt_file_by_patch_id(result.patch_id_for("a.txt")) == b"X content"
            assert client.read_quilt_file_by_patch_id(result.patch_id_for("b.txt")) == b"Y content"

    @pytest.mark.asyncio
    async def test_store_then_read_quilt_async(self, mock_env_clear, fake_walrus):
        async with AsyncWalrusClient(AGGREGATOR, PUBLISHER) as client:
            result = await client.store_quilt({"a.txt": b"X", "b.txt": b"Y"})

            contents = {
                identifier: await client.read_quilt_file_by_patch_id(patch_id)
                for identifier, patch_id in result.patch_ids.items()
            }

        assert contents == {"a.txt": b"X", "b.txt": b"Y"}

    def test_patch_id_for_unknown_identifier(self, mock_env_clear, fake_walrus):
        with WalrusClient(AGGREGATOR, PUBLISHER) as client:
            result = client.store_quilt([("a.txt", b"X")])

        with pytest.raises(KeyError):
            result.patch_id_for("missing.txt")
