#!/usr/bin/env python3
"""Main entry point: catalog search from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path

from group_jukebox.domain.catalog.value_objects import CatalogItemKind
from group_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

_SEARCH_KINDS: dict[str, CatalogItemKind] = {
    "search": CatalogItemKind.TRACK,
    "searchalbum": CatalogItemKind.ALBUM,
    "searchplaylist": CatalogItemKind.PLAYLIST,
}


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH)
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="group-jukebox",
        description="Search the music catalog the way the chat commands do.",
    )
    parser.add_argument("command", choices=sorted(_SEARCH_KINDS), help="what to search for")
    parser.add_argument("query", nargs="+", help="search phrase, e.g. 'Foo Fighters - Best of You'")
    parser.add_argument("--limit", type=int, default=None, help="number of results (1-50)")
    return parser


async def run_search(command: str, query: str, limit: int | None = None) -> str:
    from group_jukebox.application.queries.search_catalog import SearchCatalogQuery
    from group_jukebox.config.container import create_container
    from group_jukebox.config.settings import get_settings

    settings = get_settings()
    container = create_container(settings)
    try:
        result = await container.search_handler.handle(
            SearchCatalogQuery(
                kind=_SEARCH_KINDS[command],
                query=query,
                limit=limit or settings.catalog.search_limit,
            )
        )
        return result.message
    finally:
        await container.shutdown()


def main(argv: list[str] | None = None) -> int:
    from group_jukebox.config.settings import get_settings

    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    if not settings.catalog.has_credentials:
        logger.error(ErrorMessages.CATALOG_CREDENTIALS_REQUIRED)
        return 1

    try:
        print(asyncio.run(run_search(args.command, " ".join(args.query), args.limit)))
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.exception("Search failed: %s", e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
