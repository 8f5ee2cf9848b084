"""HTTP transports for the catalog pipeline.

The pipeline in ``ollama_catalog.catalog`` is written once, as
coroutines, against the ``Transport`` protocol. Two implementations
are provided:

- ``AiohttpTransport``: non-blocking, suspends on the network round trip.
- ``RequestsTransport``: blocking; its coroutine never suspends, so the
  whole pipeline can be driven to completion with ``run_blocking``.

Transports only move bytes. Status checking and JSON decoding belong
to the pipeline so both modes behave identically.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import aiohttp
import requests

from ollama_catalog.errors import TransportError
from ollama_catalog.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TransportResponse:
    """Raw HTTP response: status code and undecoded body."""

    status: int
    body: bytes
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Capability the pipeline needs from an HTTP client."""

    async def request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> TransportResponse: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """Non-blocking transport backed by ``aiohttp.ClientSession``.

    Usage:
        transport = AiohttpTransport(timeout=10)
        try:
            models = await list_catalog(transport, config)
        finally:
            await transport.close()
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the transport.

        Args:
            session: Existing session to reuse (not closed by this transport)
            timeout: Total request timeout in seconds
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> TransportResponse:
        session = await self._ensure_session()
        try:
            async with session.request(
                method, url, json=payload, timeout=self.timeout
            ) as resp:
                body = await resp.read()
                return TransportResponse(status=resp.status, body=body, url=url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("catalog_request_failed", method=method, url=url, error=repr(e))
            raise TransportError(f"{method} request failed: {e!r}", url=url) from e

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None


class RequestsTransport:
    """Blocking transport backed by ``requests.Session``.

    ``request`` is a coroutine only so it fits the shared pipeline;
    it performs the HTTP call synchronously and never suspends.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _ensure_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> TransportResponse:
        session = self._ensure_session()
        try:
            resp = session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("catalog_request_failed", method=method, url=url, error=repr(e))
            raise TransportError(f"{method} request failed: {e!r}", url=url) from e
        return TransportResponse(status=resp.status_code, body=resp.content, url=url)

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
        self._session = None


def run_blocking(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a pipeline coroutine to completion on the calling thread.

    Only valid for coroutines that never suspend, i.e. pipelines running
    over a blocking transport.

    Args:
        coro: Coroutine to run

    Returns:
        The coroutine's return value

    Raises:
        RuntimeError: If the coroutine suspends
    """
    try:
        coro.send(None)
    except StopIteration as done:
        return done.value
    coro.close()
    raise RuntimeError(
        "Coroutine suspended under run_blocking; use AsyncOllamaClient "
        "for non-blocking transports"
    )
