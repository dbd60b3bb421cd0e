"""CLI entry point — run searches from the command line.

Examples::

    unsearch search "svelte" --documents guides.json --keys title,tags --facet tags
    unsearch search "" --documents products.json --filter '{"price": {"between": [10, 20]}}' --sort -price
    unsearch --config unsearch.yaml search "getting started" --page 1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from unsearch.adapters.base.exceptions import AdapterError, ConfigurationError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from unsearch.config.settings import Settings
    from unsearch.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.log_level:
        settings.observability.log_level = args.log_level
    if args.log_format:
        settings.observability.log_format = args.log_format
    setup_logging(settings.observability)

    if args.command != "search":
        parser.print_help()
        sys.exit(2)

    if args.documents:
        settings.index.adapter = "memory"
    if args.keys:
        settings.index.keys = [key.strip() for key in args.keys.split(",") if key.strip()]
    if args.page_size:
        settings.index.page_size = args.page_size

    try:
        options = _search_options(args)
        documents = _load_documents(Path(args.documents)) if args.documents else None
        result = asyncio.run(_search(settings, args.query, options, documents))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (AdapterError, OSError) as e:
        logger.error("Search failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unsearch",
        description="unsearch — one search API over Algolia, MeiliSearch, Typesense and memory",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        choices=["json", "console"],
        default=None,
        help="Log format (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"unsearch {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")
    search = subparsers.add_parser("search", help="Search the configured index")
    search.add_argument("query", help="Search query; use '' to match everything")
    search.add_argument(
        "--documents",
        "-d",
        type=str,
        default=None,
        help="JSON (array) or JSONL file of documents to search in memory",
    )
    search.add_argument("--keys", "-k", type=str, default=None, help="Comma-separated searchable fields")
    search.add_argument("--page", "-p", type=int, default=0, help="0-based page number")
    search.add_argument("--page-size", type=int, default=None, help="Records per page")
    search.add_argument(
        "--sort",
        "-s",
        action="append",
        default=[],
        help="Sort key: 'field', 'field:desc' or '-field' (repeatable)",
    )
    search.add_argument("--facet", "-f", action="append", default=[], help="Facet field (repeatable)")
    search.add_argument(
        "--filter",
        type=str,
        default=None,
        help='Filters as JSON, e.g. \'{"price": {"gte": 10}}\'',
    )
    return parser


def _search_options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {"page": args.page, "sort": args.sort, "facets": args.facet}
    if args.filter:
        try:
            options["filters"] = json.loads(args.filter)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"--filter is not valid JSON: {e}") from e
    return options


def _load_documents(path: Path) -> list[dict[str, Any]]:
    """Load documents from a JSON array or a JSONL file."""
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".jsonl":
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise ConfigurationError(f"{path} must contain a JSON array of documents")
    return data


async def _search(
    settings: Any,
    query: str,
    options: dict[str, Any],
    documents: list[dict[str, Any]] | None,
) -> dict[str, Any]:
    from unsearch.index import Index

    async with Index.from_settings(settings.index) as index:
        if documents:
            await index.submit(documents)
        result = await index.search(query, options)
    return result.model_dump(mode="json")


def _get_version() -> str:
    """Get the package version."""
    try:
        from unsearch import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
