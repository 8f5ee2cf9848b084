"""Ollama catalog clients.

Provides a non-blocking ``AsyncOllamaClient`` and a blocking
``OllamaClient``. Both run the same pipeline from
``ollama_catalog.catalog`` and return identical results; they differ
only in the transport they drive it with.
"""

from __future__ import annotations

from typing import Any

from ollama_catalog import catalog
from ollama_catalog.config import ClientConfig
from ollama_catalog.errors import CatalogError
from ollama_catalog.models import FullRecord, PartialRecord
from ollama_catalog.transport import (
    DEFAULT_TIMEOUT,
    AiohttpTransport,
    RequestsTransport,
    Transport,
    run_blocking,
)


class AsyncOllamaClient:
    """Non-blocking catalog client.

    Usage:
        config = ClientConfig().with_host("http://0.0.0.0")
        async with AsyncOllamaClient(config) as client:
            for model in await client.list_enriched():
                print(model.name, model.details.family)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the client.

        Args:
            config: Server configuration (defaults to http://localhost:11434)
            transport: Non-blocking transport (an AiohttpTransport by default)
            timeout: Request timeout in seconds for the default transport
        """
        self.config = config or ClientConfig()
        self.transport = transport or AiohttpTransport(timeout=timeout)

    async def __aenter__(self) -> AsyncOllamaClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def list_models(self) -> list[PartialRecord]:
        """List installed models (partial records, server order)."""
        return await catalog.list_catalog(self.transport, self.config)

    async def show(self, model_id: str, verbose: bool | None = None) -> FullRecord:
        """Fetch full metadata for one model."""
        return await catalog.get_details(self.transport, model_id, self.config, verbose)

    async def enrich(self, partial: PartialRecord) -> FullRecord:
        """Resolve a catalog entry into a full record, keeping its name."""
        return await catalog.enrich(self.transport, partial, self.config)

    async def list_enriched(
        self, *, return_exceptions: bool = False
    ) -> list[FullRecord | CatalogError]:
        """List the catalog and enrich every entry sequentially."""
        return await catalog.list_enriched(
            self.transport, self.config, return_exceptions=return_exceptions
        )


class OllamaClient:
    """Blocking catalog client.

    Usage:
        with OllamaClient(ClientConfig.from_env()) as client:
            partials = client.list_models()
            full = client.enrich(partials[0])
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the client.

        Args:
            config: Server configuration (defaults to http://localhost:11434)
            transport: Transport whose coroutines never suspend
                (a RequestsTransport by default)
            timeout: Request timeout in seconds for the default transport
        """
        self.config = config or ClientConfig()
        self.transport = transport or RequestsTransport(timeout=timeout)

    def __enter__(self) -> OllamaClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        run_blocking(self.transport.close())

    def list_models(self) -> list[PartialRecord]:
        return run_blocking(catalog.list_catalog(self.transport, self.config))

    def show(self, model_id: str, verbose: bool | None = None) -> FullRecord:
        return run_blocking(
            catalog.get_details(self.transport, model_id, self.config, verbose)
        )

    def enrich(self, partial: PartialRecord) -> FullRecord:
        return run_blocking(catalog.enrich(self.transport, partial, self.config))

    def list_enriched(
        self, *, return_exceptions: bool = False
    ) -> list[FullRecord | CatalogError]:
        return run_blocking(
            catalog.list_enriched(
                self.transport, self.config, return_exceptions=return_exceptions
            )
        )


# ==================== Convenience Functions ====================


def list_models(config: ClientConfig | None = None) -> list[PartialRecord]:
    """List installed models with a throwaway blocking client.

    Args:
        config: Server configuration (defaults to http://localhost:11434)

    Returns:
        Partial records in server order
    """
    with OllamaClient(config) as client:
        return client.list_models()


def show_model(
    model_id: str,
    config: ClientConfig | None = None,
    verbose: bool | None = None,
) -> FullRecord:
    """Fetch one model's details with a throwaway blocking client."""
    with OllamaClient(config) as client:
        return client.show(model_id, verbose)
