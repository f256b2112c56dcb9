#!/usr/bin/env python3
"""
Store a blob through the publisher and read it back from the aggregator.

Requirements:
- WALRUS_AGGREGATOR_URL and WALRUS_PUBLISHER_URL environment variables set
  (a .env file works too)

Usage:
    python examples/blob_store_and_read.py
"""

import os

from dotenv import load_dotenv

from walrus_client import AlreadyCertified, NewlyCreated, WalrusClient

load_dotenv()


def main() -> None:
    if not (os.getenv("WALRUS_AGGREGATOR_URL") and os.getenv("WALRUS_PUBLISHER_URL")):
        print("Set WALRUS_AGGREGATOR_URL and WALRUS_PUBLISHER_URL to run this example")
        return

    with WalrusClient() as client:
        outcome = client.store_blob(b"some string from the Python client", epochs=1)

        if isinstance(outcome, NewlyCreated):
            obj = outcome.blob_object
            print("newly created:", obj.blob_id, "object", obj.id, "cost", outcome.cost)
            print("storage until epoch", obj.storage.end_epoch)
        elif isinstance(outcome, AlreadyCertified):
            print("already certified:", outcome.blob_id, "until epoch", outcome.end_epoch)

        data = client.read_blob_by_id(outcome.blob_id)
        print("read back:", data.decode())

        meta = client.get_blob_metadata(outcome.blob_id)
        print("metadata:", meta.content_length, "bytes,", meta.content_type, "etag", meta.etag)


if __name__ == "__main__":
    main()
