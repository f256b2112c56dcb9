"""Fixtures for integration tests using respx mocking."""

import pytest

BLOB_ID = "jUtX26C8c9csndZOUSrYmyLKlL_4CPfH1M4fnTI_kjY"
QUILT_ID = "q9Vx3kO3pS7b0Zy4gQ2nA1tUeLmWc5rHdJfK8iEoB6s"
OBJECT_ID = "0x5e1f1a2b3c4d5e6f708192a3b4c5d6e7f8091a2b3c4d5e6f708192a3b4c5d6e7"


@pytest.fixture
def newly_created_response() -> dict:
    """Mock publisher response for a blob stored for the first time."""
    return {
        "newlyCreated": {
            "blobObject": {
                "id": OBJECT_ID,
                "registeredEpoch": 34,
                "blobId": BLOB_ID,
                "size": 17,
                "encodingType": "RS2",
                "certifiedEpoch": 34,
                "storage": {
                    "id": "0x7a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f60718293a4b5c6d7e8f9",
                    "startEpoch": 34,
                    "endEpoch": 35,
                    "storageSize": 66034000,
                },
                "deletable": False,
            },
            "resourceOperation": {
                "registerFromScratch": {"encodedLength": 66034000, "epochsAhead": 1}
            },
            "cost": 132300,
        }
    }


@pytest.fixture
def already_certified_response() -> dict:
    """Mock publisher response for a blob another writer already certified."""
    return {
        "alreadyCertified": {
            "blobId": BLOB_ID,
            "event": {
                "txDigest": "4XQHFa9S324wTzYHF3vsBSwpu7m4wyGUtXqgL2d8nT3o",
                "eventSeq": "0",
            },
            "endEpoch": 58,
        }
    }


@pytest.fixture
def quilt_store_response(newly_created_response) -> dict:
    """Mock publisher response for a two-file quilt.

    Patches are deliberately listed in the reverse of the upload order.
    """
    created = dict(newly_created_response["newlyCreated"])
    created["blobObject"] = {**created["blobObject"], "blobId": QUILT_ID}
    return {
        "blobStoreResult": {"newlyCreated": created},
        "storedQuiltBlobs": [
            {"identifier": "b.txt", "quiltPatchId": f"{QUILT_ID}BAEAAgA"},
            {"identifier": "a.txt", "quiltPatchId": f"{QUILT_ID}AQACAAA"},
        ],
    }


@pytest.fixture
def blob_id() -> str:
    return BLOB_ID


@pytest.fixture
def quilt_id() -> str:
    return QUILT_ID


@pytest.fixture
def object_id() -> str:
    return OBJECT_ID
