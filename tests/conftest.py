"""Pytest configuration and shared fixtures."""
import json
import logging
import os
from urllib.parse import urlsplit

import pytest
import structlog

from ollama_catalog.transport import TransportResponse


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless OLLAMA_CATALOG_INTEGRATION=1."""
    if os.environ.get("OLLAMA_CATALOG_INTEGRATION") in ("1", "true", "True"):
        return
    skip = pytest.mark.skip(reason="Set OLLAMA_CATALOG_INTEGRATION=1 to run integration tests")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


# =============================================================================
# Test Helpers
# =============================================================================

def _encode(body):
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


class FakeTransport:
    """In-memory transport whose coroutines never suspend.

    Works under both ``asyncio.run`` and ``run_blocking``.
    """

    def __init__(self):
        self.tags = None
        self.show = {}
        self.calls = []
        self.closed = False

    def set_tags(self, body, status=200):
        self.tags = (status, _encode(body))
        return self

    def set_show(self, model_id, body, status=200):
        self.show[model_id] = (status, _encode(body))
        return self

    def fail_show(self, model_id, exc):
        self.show[model_id] = exc
        return self

    async def request(self, method, url, payload=None):
        self.calls.append((method, url, payload))
        path = urlsplit(url).path

        route = None
        if method == "GET" and path == "/api/tags":
            route = self.tags
        elif method == "POST" and path == "/api/show":
            route = self.show.get(payload["name"])

        if isinstance(route, Exception):
            raise route
        if route is None:
            return TransportResponse(status=404, body=b'{"error":"not found"}', url=url)
        status, body = route
        return TransportResponse(status=status, body=body, url=url)

    async def close(self):
        self.closed = True


def tags_body(*entries):
    return {"models": list(entries)}


def partial_entry(name, model=None, size=10, digest="d", modified_at="t"):
    return {
        "name": name,
        "model": model or name,
        "modified_at": modified_at,
        "size": size,
        "digest": digest,
    }


def show_body(**overrides):
    body = {
        "modelfile": "FROM m",
        "parameters": "p",
        "template": "t",
        "details": {
            "parent_model": "",
            "format": "gguf",
            "family": "f",
            "families": ["f"],
            "parameter_size": "3B",
            "quantization_level": "Q4_K_M",
        },
        "model_info": None,
    }
    body.update(overrides)
    return body


@pytest.fixture(scope="session")
def make_transport():
    """Factory for FakeTransport (session scoped so hypothesis tests can use it)."""
    return FakeTransport


@pytest.fixture(scope="session")
def payloads():
    """Builders for listing and detail response bodies."""

    class _Payloads:
        tags = staticmethod(tags_body)
        partial = staticmethod(partial_entry)
        show = staticmethod(show_body)

    return _Payloads


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging calls made by a test (the CLI makes one)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("ollama_catalog").setLevel(logging.NOTSET)
    structlog.reset_defaults()
