"""Client configuration and endpoint resolution.

Provides the immutable ``ClientConfig`` value and the helper that turns
a config plus an endpoint suffix into an absolute request URL.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from urllib.parse import urlsplit

DEFAULT_HOST = "http://localhost"
DEFAULT_PORT = 11434

TAGS_ENDPOINT = "/api/tags"
SHOW_ENDPOINT = "/api/show"

ENV_HOST = "OLLAMA_HOST"


@dataclass(frozen=True)
class ClientConfig:
    """Base URL of an Ollama server, split into host and optional port.

    Instances are frozen: ``with_host`` and ``with_port`` return a new
    config, so a value can be shared between concurrent calls freely.

    Usage:
        config = ClientConfig().with_host("http://0.0.0.0").with_port(11434)
        config.base_url()  # "http://0.0.0.0:11434"
    """

    host: str = DEFAULT_HOST
    port: int | None = DEFAULT_PORT

    def with_host(self, host: str) -> ClientConfig:
        """Return a copy with ``host`` overridden."""
        return replace(self, host=host)

    def with_port(self, port: int | None) -> ClientConfig:
        """Return a copy with ``port`` overridden (``None`` drops the port)."""
        return replace(self, port=port)

    def base_url(self) -> str:
        """Host followed by ``:port`` when a port is set."""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str, default_port: int | None = None) -> ClientConfig:
        """Split a base URL such as ``http://0.0.0.0:11434`` into a config.

        Args:
            url: Absolute base URL (scheme and host required)
            default_port: Port to use when the URL carries none

        Returns:
            ClientConfig instance

        Raises:
            ValueError: If the URL has no scheme or host
        """
        parts = urlsplit(url.strip())
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Invalid base URL: {url!r}")

        hostname = parts.hostname
        if ":" in hostname:
            hostname = f"[{hostname}]"

        port = parts.port if parts.port is not None else default_port
        return cls(host=f"{parts.scheme}://{hostname}", port=port)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Load configuration from the ``OLLAMA_HOST`` environment variable.

        Accepts ``http://host:port``, ``host:port`` or a bare ``host``.
        Without a scheme, ``http://`` is assumed and a missing port falls
        back to the default port, matching the Ollama tooling.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            ClientConfig instance (defaults when the variable is unset)
        """
        if environ is None:
            environ = os.environ

        raw = environ.get(ENV_HOST, "").strip()
        if not raw:
            return cls()

        if "://" not in raw:
            return cls.from_url(f"http://{raw}", default_port=DEFAULT_PORT)
        return cls.from_url(raw)


def resolve_url(config: ClientConfig | None, suffix: str) -> str:
    """Build the absolute URL for an endpoint suffix.

    Args:
        config: Client configuration, or None for the default server
        suffix: Endpoint path such as ``/api/tags``

    Returns:
        Absolute request URL
    """
    if config is None:
        config = ClientConfig()
    return config.base_url() + suffix
