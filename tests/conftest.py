"""Shared fixtures for all tests."""

import time
import uuid
from collections.abc import Generator

import pytest


@pytest.fixture
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear Walrus-related environment variables for testing.

    This ensures tests don't accidentally talk to a real deployment configured
    in the environment.
    """
    for var in ("WALRUS_AGGREGATOR_URL", "WALRUS_PUBLISHER_URL", "DEBUG"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def unique_identifier() -> str:
    """Generate a unique identifier with timestamp."""
    timestamp = int(time.time())
    unique_id = uuid.uuid4().hex[:8]
    return f"walrus-py-test-{timestamp}-{unique_id}"

