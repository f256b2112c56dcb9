from __future__ import annotations

import os
import platform
import sys
from typing import Any

from .errors import InvalidParameterError

VERSION = "0.1.0"
USER_AGENT = (
    f"walrus-client/{VERSION} "
    f"(Python/{platform.python_version()}; {platform.system()}/{platform.machine()})"
)

_FORBIDDEN_SEGMENT_CHARS = frozenset("/\\?#")


def debug(message: str, *args: Any) -> None:
    debug_env = os.getenv("DEBUG", "")
    if "walrus" in debug_env:
        print(f"walrus-client: {message}", *args, file=sys.stderr)


def validate_path_segment(value: str, name: str) -> str:
    """Check that ``value`` can be placed verbatim as one URL path segment.

    Characters that are merely unusual (spaces, non-ASCII) are left for httpx
    to percent-encode. Anything that would change the path structure, start a
    query or fragment, or is a control character is rejected.
    """
    if not isinstance(value, str):
        raise InvalidParameterError(f"{name} must be a string, got {type(value).__name__}")
    if not value:
        raise InvalidParameterError(f"{name} must not be empty")
    if value in (".", ".."):
        raise InvalidParameterError(f"{name} must not be {value!r}")
    for ch in value:
        if ch in _FORBIDDEN_SEGMENT_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7F:
            raise InvalidParameterError(f"{name} contains a character not allowed in a URL path: {ch!r}")
    return value


def to_payload(data: Any, name: str = "data") -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    raise InvalidParameterError(
        f"{name} must be bytes, bytearray, memoryview or str, got {type(data).__name__}"
    )


__all__ = ["VERSION", "USER_AGENT", "debug", "validate_path_segment", "to_payload"]
