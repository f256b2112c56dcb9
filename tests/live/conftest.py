"""Fixtures for live tests against a real Walrus deployment.

These tests require endpoint URLs set via environment variables:
- WALRUS_AGGREGATOR_URL: aggregator base URL
- WALRUS_PUBLISHER_URL: publisher base URL

A ``.env`` file in the working directory is loaded first, if present.
"""

import os

import pytest
from dotenv import load_dotenv

load_dotenv()


@pytest.fixture
def walrus_urls() -> tuple[str, str]:
    """Get aggregator and publisher URLs from the environment."""
    aggregator_url = os.getenv("WALRUS_AGGREGATOR_URL")
    publisher_url = os.getenv("WALRUS_PUBLISHER_URL")
    if not (aggregator_url and publisher_url):
        pytest.skip("WALRUS_AGGREGATOR_URL and WALRUS_PUBLISHER_URL environment variables not set")
    return aggregator_url, publisher_url
