from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from ollama_catalog.client import OllamaClient
from ollama_catalog.config import ClientConfig
from ollama_catalog.errors import CatalogError
from ollama_catalog.logging_config import configure_for_cli
from ollama_catalog.models import FullRecord, PartialRecord


def _human_size(size_bytes: float) -> str:
    """Convert bytes to human readable string."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} PB"


def _build_config(host: str | None, port: int | None) -> ClientConfig:
    # flags > OLLAMA_HOST > defaults
    config = ClientConfig.from_env()
    if host:
        config = config.with_host(host)
    if port is not None:
        config = config.with_port(port)
    return config


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def _partial_line(model: PartialRecord) -> str:
    return f"- {model.name:40} {_human_size(model.size):>10}  {model.modified_at}"


def _full_line(model: FullRecord) -> str:
    details = model.details
    extra = " ".join(
        x for x in (details.family, details.parameter_size, details.quantization_level) if x
    )
    return f"- {model.name:40} {_human_size(model.size):>10}  {extra}"


def cmd_list(client: OllamaClient, enrich: bool, as_json: bool) -> None:
    if not enrich:
        models = client.list_models()
        if as_json:
            _print_json([m.to_dict() for m in models])
            return
        for m in models:
            print(_partial_line(m))
        print(f"\n{len(models)} model(s)")
        return

    results = client.list_enriched(return_exceptions=True)
    failures = [r for r in results if isinstance(r, CatalogError)]
    records = [r for r in results if isinstance(r, FullRecord)]

    if as_json:
        _print_json([r.to_dict() for r in records])
    else:
        for r in records:
            print(_full_line(r))
        print(f"\n{len(records)} model(s)")

    if failures:
        raise RuntimeError(
            f"{len(failures)} model(s) could not be enriched: "
            + "; ".join(str(f) for f in failures)
        )


def cmd_show(client: OllamaClient, model_id: str, verbose: bool, as_json: bool) -> None:
    record = client.show(model_id, verbose=True if verbose else None)
    if as_json:
        _print_json(record.to_dict())
        return

    details = record.details
    print(f"Model:        {record.name}")
    print(f"Family:       {details.family or '-'}")
    if details.families:
        print(f"Families:     {', '.join(details.families)}")
    print(f"Format:       {details.format or '-'}")
    print(f"Parameters:   {details.parameter_size or '-'}")
    print(f"Quantization: {details.quantization_level or '-'}")
    if record.parameters:
        print("\nParameters:")
        print(record.parameters)
    if record.template:
        print("\nTemplate:")
        print(record.template)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ollama-catalog")
    p.add_argument("--host", default=None, help="Server host including scheme (default: $OLLAMA_HOST or http://localhost)")
    p.add_argument("--port", type=int, default=None, help="Server port (default: 11434)")
    p.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    p.add_argument("--log-file", type=Path, default=None, help="Write logs to this file instead of stderr")

    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List installed models")
    ls.add_argument("--enrich", action="store_true", help="Fetch full details for every model")
    ls.add_argument("--json", dest="as_json", action="store_true")

    show = sub.add_parser("show", help="Show one model's details")
    show.add_argument("model")
    show.add_argument("--verbose", dest="show_verbose", action="store_true", help="Request verbose model_info")
    show.add_argument("--json", dest="as_json", action="store_true")

    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_for_cli(
        verbose=args.verbose, json_output=args.json_logs, log_file=args.log_file
    )

    try:
        config = _build_config(args.host, args.port)
        with OllamaClient(config, timeout=args.timeout) as client:
            if args.cmd == "list":
                cmd_list(client, args.enrich, args.as_json)
            elif args.cmd == "show":
                cmd_show(client, args.model, args.show_verbose, args.as_json)
    except (CatalogError, RuntimeError, ValueError) as e:
        raise SystemExit(f"ERROR: {e}") from e


if __name__ == "__main__":
    main()
