from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from streamshelf.domain.entities.catalog import CatalogSnapshot
from streamshelf.domain.errors import InvalidCatalogUrlError, StreamshelfError
from streamshelf.domain.manifest import catalog_to_dict
from streamshelf.infrastructure.config import AppConfig, load_config
from streamshelf.infrastructure.logging.setup import configure_logging
from streamshelf.interfaces.app_state import AppState
from streamshelf.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="streamshelf",
        description="Cached video catalog and hosting-page stream resolver.",
    )

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Override cache directory.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    catalog = sub.add_parser("catalog", help="Load the catalog (cache + network).")
    catalog.add_argument(
        "--all",
        action="store_true",
        help="Print every surfaced snapshot (one JSON object per line).",
    )

    resolve = sub.add_parser("resolve", help="Resolve a hosting page to a stream URL.")
    resolve.add_argument("page_url", help="Hosting page URL (ok.ru, vkvideo.ru, ...).")

    sub.add_parser("clear-cache", help="Delete the cached catalog.")
    sub.add_parser("get-url", help="Show the configured catalog URL.")
    set_url = sub.add_parser("set-url", help="Configure the catalog URL.")
    set_url.add_argument("url")
    sub.add_parser("reset-url", help="Restore the default catalog URL.")
    sub.add_parser("providers", help="List supported providers in dispatch order.")

    return parser.parse_args(list(argv) if argv is not None else None)


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _snapshot_payload(snapshot: CatalogSnapshot) -> dict[str, Any]:
    return {
        "origin": snapshot.origin,
        "source_url": snapshot.source_url,
        "catalog": catalog_to_dict(snapshot.catalog),
    }


async def _dispatch(args: argparse.Namespace, state: AppState) -> int:
    repo = state.content_repository

    if args.command == "catalog":
        if args.all:
            async for snapshot in repo.catalog_updates():
                _emit(_snapshot_payload(snapshot))
        else:
            _emit(_snapshot_payload(await repo.get_catalog()))
    elif args.command == "resolve":
        stream = await repo.resolve_video(args.page_url)
        _emit(dataclasses.asdict(stream))
    elif args.command == "clear-cache":
        await repo.clear_cache()
    elif args.command == "get-url":
        _emit({"catalog_url": await repo.get_catalog_url()})
    elif args.command == "set-url":
        await repo.set_catalog_url(args.url)
    elif args.command == "reset-url":
        await state.settings.reset_catalog_url()
    elif args.command == "providers":
        _emit(state.extractor_registry.supported_providers)
    return EXIT_OK


async def _run(args: argparse.Namespace, config: AppConfig) -> int:
    async with lifespan(config) as state:
        return await _dispatch(args, state)


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Config is loaded exactly once here, then every command runs inside
    one lifespan (cache + HTTP client opened and closed around it).
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.cache_dir:
        cli_overrides["cache_dir"] = args.cache_dir
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )
    configure_logging(config)

    try:
        return asyncio.run(_run(args, config))
    except InvalidCatalogUrlError as exc:
        log.error("command_invalid", command=args.command, error=str(exc))
        return EXIT_USAGE
    except StreamshelfError as exc:
        # Terminal for this request; the caller decides whether to retry.
        log.error(
            "command_failed",
            command=args.command,
            error_type=type(exc).__name__,
            error=str(exc),
            retryable=exc.retryable,
        )
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(start())
