"""HTTP configuration for Walrus clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import httpx

from ..errors import ConfigError

DEFAULT_TIMEOUT = 60.0

AGGREGATOR_URL_ENV = "WALRUS_AGGREGATOR_URL"
PUBLISHER_URL_ENV = "WALRUS_PUBLISHER_URL"


def normalize_base_url(base_url: str) -> str:
    """Ensure base_url ends with a trailing slash for consistent URL joining."""
    return base_url.rstrip("/") + "/"


def validate_base_url(value: str, role: str) -> str:
    """Parse an absolute http(s) base URL and return it normalized.

    Raises:
        ConfigError: If the URL cannot be parsed, is relative, or carries a
            query string or fragment. The message names ``role``.
    """
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigError(f"Invalid {role} URL: {exc}") from exc

    if url.scheme not in ("http", "https"):
        raise ConfigError(f"Invalid {role} URL: expected an http(s) URL, got {value!r}")
    if not url.host:
        raise ConfigError(f"Invalid {role} URL: missing host in {value!r}")
    if url.query or url.fragment:
        raise ConfigError(f"Invalid {role} URL: query and fragment are not allowed in {value!r}")

    return normalize_base_url(str(url))


def _resolve_url(value: str | None, env_var: str, role: str) -> str:
    resolved = value if value is not None else (os.getenv(env_var) or None)
    if resolved is None:
        raise ConfigError(f"Missing {role} URL. Pass {role}_url=... or set {env_var}.")
    return validate_base_url(resolved, role)


@dataclass
class ClientConfig:
    """Resolved configuration shared by the blocking and async clients."""

    aggregator_url: str
    publisher_url: str
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_values(
        cls,
        aggregator_url: str | None = None,
        publisher_url: str | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> ClientConfig:
        """Build a config, falling back to the environment for missing URLs."""
        return cls(
            aggregator_url=_resolve_url(aggregator_url, AGGREGATOR_URL_ENV, "aggregator"),
            publisher_url=_resolve_url(publisher_url, PUBLISHER_URL_ENV, "publisher"),
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            headers=dict(headers or {}),
        )

    def aggregator(self, path: str) -> str:
        return self.aggregator_url + path.lstrip("/")

    def publisher(self, path: str) -> str:
        return self.publisher_url + path.lstrip("/")


__all__ = [
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    "AGGREGATOR_URL_ENV",
    "PUBLISHER_URL_ENV",
    "normalize_base_url",
    "validate_base_url",
]
