"""Catalog enrichment pipeline.

Turns the cheap ``/api/tags`` listing into fully populated records by
issuing one ``/api/show`` request per entry. Every operation here is a
coroutine over a ``Transport``; the blocking client runs the same
coroutines with ``run_blocking`` over ``RequestsTransport``.

Usage:
    transport = AiohttpTransport()
    partials = await list_catalog(transport, config)
    full = await enrich(transport, partials[0], config)
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from ollama_catalog.config import SHOW_ENDPOINT, TAGS_ENDPOINT, ClientConfig, resolve_url
from ollama_catalog.errors import CatalogError, DecodeError, TransportError
from ollama_catalog.logging_config import get_logger, is_debug_enabled
from ollama_catalog.models import FullRecord, PartialRecord
from ollama_catalog.transport import Transport, TransportResponse

logger = get_logger(__name__)


async def _send(
    transport: Transport,
    method: str,
    url: str,
    payload: dict[str, Any] | None = None,
) -> TransportResponse:
    """Issue a request and reject non-2xx responses before any decoding."""
    logger.info("catalog_request_sent", method=method, url=url)
    resp = await transport.request(method, url, payload)
    if is_debug_enabled(__name__):
        logger.debug(
            "catalog_response_received",
            url=url,
            status=resp.status,
            bytes=len(resp.body),
            body=resp.body.decode("utf-8", errors="replace"),
        )

    if not resp.ok:
        logger.error("catalog_request_failed", method=method, url=url, status=resp.status)
        raise TransportError(
            f"{method} request returned HTTP {resp.status}",
            url=url,
            status=resp.status,
            body=resp.body,
        )
    return resp


def _parse_json(resp: TransportResponse) -> Any:
    try:
        return json.loads(resp.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(
            f"Response from {resp.url} is not valid JSON: {e}",
            body=resp.body,
            expected="JSON document",
        ) from e


async def list_catalog(
    transport: Transport,
    config: ClientConfig | None = None,
) -> list[PartialRecord]:
    """List installed models.

    Args:
        transport: Transport to issue the request with
        config: Server configuration (defaults when None)

    Returns:
        Partial records in server order

    Raises:
        TransportError: If the request fails or returns a non-2xx status
        DecodeError: If the body is not ``{"models": [...]}``
    """
    url = resolve_url(config, TAGS_ENDPOINT)
    resp = await _send(transport, "GET", url)
    data = _parse_json(resp)

    if not isinstance(data, dict) or "models" not in data:
        raise DecodeError(
            "Listing response has no 'models' field",
            body=resp.body,
            expected="models: array",
        )
    entries = data["models"]
    if not isinstance(entries, list):
        raise DecodeError(
            f"Listing field 'models' has type {type(entries).__name__}",
            body=resp.body,
            expected="models: array",
        )

    try:
        records = [PartialRecord.from_dict(entry) for entry in entries]
    except DecodeError as e:
        raise e.with_body(resp.body)

    logger.info("catalog_listed", url=url, count=len(records))
    return records


async def get_details(
    transport: Transport,
    model_id: str,
    config: ClientConfig | None = None,
    verbose: bool | None = None,
) -> FullRecord:
    """Fetch full metadata for one model.

    The returned record carries whatever name the server reports;
    matching it to a catalog entry is ``enrich``'s job.

    Args:
        transport: Transport to issue the request with
        model_id: Model identifier (the ``model`` field of a listing entry)
        config: Server configuration (defaults when None)
        verbose: Ask for verbose ``model_info``; omitted from the body when None

    Returns:
        FullRecord decoded from the ``/api/show`` response

    Raises:
        TransportError: If the request fails or returns a non-2xx status
        DecodeError: If the body does not have the expected shape
    """
    return await _show(transport, model_id, config, verbose)


async def _show(
    transport: Transport,
    model_id: str,
    config: ClientConfig | None,
    verbose: bool | None,
    fallback: PartialRecord | None = None,
) -> FullRecord:
    url = resolve_url(config, SHOW_ENDPOINT)
    payload: dict[str, Any] = {"name": model_id}
    if verbose is not None:
        payload["verbose"] = verbose

    resp = await _send(transport, "POST", url, payload)
    data = _parse_json(resp)

    try:
        return FullRecord.from_show_response(data, model_id, fallback=fallback)
    except DecodeError as e:
        raise e.with_body(resp.body)


async def enrich(
    transport: Transport,
    partial: PartialRecord,
    config: ClientConfig | None = None,
) -> FullRecord:
    """Resolve a catalog entry into a full record.

    The catalog name always wins over the name reported by the detail
    endpoint. Catalog fields the detail response omits are taken from
    ``partial``; fields it reports (even ``0`` or ``""``) are kept.

    Raises:
        TransportError: Propagated from the detail request
        DecodeError: Propagated from the detail request
    """
    full = await _show(transport, partial.model_id, config, verbose=True, fallback=partial)
    record = replace(full, name=partial.name)
    logger.debug("model_enriched", name=record.name, model_id=record.model_id)
    return record


async def enrich_catalog(
    transport: Transport,
    partials: Iterable[PartialRecord],
    config: ClientConfig | None = None,
    *,
    return_exceptions: bool = False,
) -> list[FullRecord | CatalogError]:
    """Enrich many catalog entries, one detail request at a time.

    Requests are issued sequentially in input order.

    Args:
        transport: Transport to issue the requests with
        partials: Catalog entries to enrich
        config: Server configuration (defaults when None)
        return_exceptions: When False the first failure propagates and
            nothing is returned. When True every entry is attempted and a
            failing entry yields its ``CatalogError`` in place of a record.

    Returns:
        One result per input, in input order
    """
    results: list[FullRecord | CatalogError] = []
    for partial in partials:
        try:
            results.append(await enrich(transport, partial, config))
        except CatalogError as e:
            if not return_exceptions:
                raise
            logger.warning(
                "catalog_enrich_failed",
                name=partial.name,
                model_id=partial.model_id,
                error=str(e),
            )
            results.append(e)
    return results


async def list_enriched(
    transport: Transport,
    config: ClientConfig | None = None,
    *,
    return_exceptions: bool = False,
) -> list[FullRecord | CatalogError]:
    """List the catalog and enrich every entry (see ``enrich_catalog``)."""
    if config is None:
        config = ClientConfig()
    partials = await list_catalog(transport, config)
    return await enrich_catalog(
        transport, partials, config, return_exceptions=return_exceptions
    )
