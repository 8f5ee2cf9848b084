"""
ollama-catalog: list and enrich the models installed on an Ollama server.

The package provides:
- ClientConfig for the server base URL
- A blocking and a non-blocking client over one shared pipeline
- Frozen record types for the listing and detail endpoints
"""

import logging

from ollama_catalog.client import AsyncOllamaClient, OllamaClient, list_models, show_model
from ollama_catalog.config import DEFAULT_HOST, DEFAULT_PORT, ClientConfig, resolve_url
from ollama_catalog.errors import CatalogError, DecodeError, TransportError
from ollama_catalog.models import FullRecord, ModelDetails, PartialRecord

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AsyncOllamaClient",
    "CatalogError",
    "ClientConfig",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DecodeError",
    "FullRecord",
    "ModelDetails",
    "OllamaClient",
    "PartialRecord",
    "TransportError",
    "list_models",
    "resolve_url",
    "show_model",
]
