"""Tests for the blocking and non-blocking clients."""
import asyncio

import pytest

import ollama_catalog
from ollama_catalog.client import AsyncOllamaClient, OllamaClient
from ollama_catalog.config import ClientConfig
from ollama_catalog.errors import CatalogError, TransportError
from ollama_catalog.models import FullRecord
from ollama_catalog.transport import AiohttpTransport, RequestsTransport


@pytest.fixture
def populated(make_transport, payloads):
    def _build():
        transport = make_transport().set_tags(
            payloads.tags(
                payloads.partial("alias", model="real:1", size=5),
                payloads.partial("broken"),
            )
        )
        transport.set_show("real:1", payloads.show(name="real:1"))
        return transport

    return _build


class TestDefaults:
    def test_blocking_defaults(self):
        client = OllamaClient()
        assert client.config == ClientConfig()
        assert isinstance(client.transport, RequestsTransport)
        assert client.transport.timeout == 30.0

    def test_async_defaults(self):
        client = AsyncOllamaClient(timeout=3)
        assert client.config.base_url() == "http://localhost:11434"
        assert isinstance(client.transport, AiohttpTransport)
        assert client.transport.timeout.total == 3


class TestOllamaClient:
    """Blocking client over a fake transport."""

    def test_list_models(self, populated):
        client = OllamaClient(transport=populated())
        assert [m.name for m in client.list_models()] == ["alias", "broken"]

    def test_show(self, populated):
        record = OllamaClient(transport=populated()).show("real:1", verbose=True)
        assert record.name == "real:1"

    def test_enrich(self, populated):
        client = OllamaClient(transport=populated())
        partial = client.list_models()[0]
        record = client.enrich(partial)
        assert record.name == "alias"
        assert record.size == 5

    def test_list_enriched_fail_fast(self, populated):
        with pytest.raises(TransportError):
            OllamaClient(transport=populated()).list_enriched()

    def test_list_enriched_collect(self, populated):
        results = OllamaClient(transport=populated()).list_enriched(return_exceptions=True)
        assert isinstance(results[0], FullRecord)
        assert isinstance(results[1], CatalogError)

    def test_return_exceptions_is_keyword_only(self, populated):
        with pytest.raises(TypeError):
            OllamaClient(transport=populated()).list_enriched(True)
        with pytest.raises(TypeError):
            AsyncOllamaClient(transport=populated()).list_enriched(True)

    def test_context_manager_closes_transport(self, populated):
        transport = populated()
        with OllamaClient(transport=transport) as client:
            client.list_models()
        assert transport.closed

    def test_uses_configured_url(self, populated):
        transport = populated()
        config = ClientConfig().with_host("http://gpu-box").with_port(9)
        OllamaClient(config, transport=transport).list_models()
        assert transport.calls[0][1] == "http://gpu-box:9/api/tags"


class TestAsyncOllamaClient:
    """Non-blocking client over a fake transport."""

    def test_matches_blocking_results(self, populated):
        async def scenario(transport):
            async with AsyncOllamaClient(transport=transport) as client:
                partials = await client.list_models()
                enriched = await client.list_enriched(return_exceptions=True)
                shown = await client.show("real:1")
                single = await client.enrich(partials[0])
            return partials, enriched, shown, single

        async_transport = populated()
        partials, enriched, shown, single = asyncio.run(scenario(async_transport))
        assert async_transport.closed

        blocking = OllamaClient(transport=populated())
        assert partials == blocking.list_models()
        assert shown == blocking.show("real:1")
        assert single == blocking.enrich(partials[0])
        assert enriched[0] == blocking.list_enriched(return_exceptions=True)[0]
        assert isinstance(enriched[1], CatalogError)


class TestConvenienceFunctions:
    def test_list_models(self, monkeypatch, payloads):
        import requests

        class _Resp:
            status_code = 200
            content = b'{"models": []}'

        seen = []

        def fake_request(self, method, url, json=None, timeout=None):
            seen.append(url)
            return _Resp()

        monkeypatch.setattr(requests.Session, "request", fake_request)

        assert ollama_catalog.list_models() == []
        assert seen == ["http://localhost:11434/api/tags"]

    def test_show_model(self, monkeypatch, payloads):
        import json

        import requests

        class _Resp:
            status_code = 200
            content = json.dumps(payloads.show()).encode()

        seen = []

        def fake_request(self, method, url, json=None, timeout=None):
            seen.append(json)
            return _Resp()

        monkeypatch.setattr(requests.Session, "request", fake_request)

        record = ollama_catalog.show_model("m:1", ClientConfig(port=1), verbose=True)
        assert record.details.family == "f"
        assert seen == [{"name": "m:1", "verbose": True}]
