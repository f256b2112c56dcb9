#!/usr/bin/env python3
"""
Store several files as one quilt with the async client and read each back.

Requirements:
- WALRUS_AGGREGATOR_URL and WALRUS_PUBLISHER_URL environment variables set

Usage:
    python examples/quilt_async.py
"""

import asyncio
import os

from dotenv import load_dotenv

from walrus_client import AsyncWalrusClient, QuiltFileInput

load_dotenv()


async def main() -> None:
    if not (os.getenv("WALRUS_AGGREGATOR_URL") and os.getenv("WALRUS_PUBLISHER_URL")):
        print("Set WALRUS_AGGREGATOR_URL and WALRUS_PUBLISHER_URL to run this example")
        return

    files = [
        QuiltFileInput("readme.txt", b"quilts bundle small files", tags={"lang": "en"}),
        QuiltFileInput("data.csv", b"epoch,size\n1,42\n"),
    ]

    async with AsyncWalrusClient() as client:
        result = await client.store_quilt(files, epochs=1)
        print("quilt id:", result.blob_store_result.blob_id)

        # Patches come back in no particular order; look them up by identifier.
        contents = await asyncio.gather(
            *(client.read_quilt_file_by_patch_id(pid) for pid in result.patch_ids.values())
        )
        for identifier, data in zip(result.patch_ids, contents):
            print(f" - {identifier}: {len(data)} bytes")


if __name__ == "__main__":
    asyncio.run(main())
