"""
Fetcher Command Line Interface

Usage:
    # Nurseries (default) -> zlobki.csv
    python -m rejestr.fetcher ZK

    # Children's clubs -> kluby.csv
    python -m rejestr.fetcher KL

    # Both, one after another
    python -m rejestr.fetcher ALL
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from rejestr.fetcher.job import FetchSummary, RegistryFetchJob
from rejestr.utils.config import Settings, get_settings
from rejestr.utils.logging import setup_logging
from rejestr.utils.registry_api import RegistryClient
from rejestr.utils.schemas import RegistryType

logger = logging.getLogger(__name__)

SELECTORS = {
    "ZK": [RegistryType.NURSERY],
    "KL": [RegistryType.CLUB],
    "ALL": [RegistryType.NURSERY, RegistryType.CLUB],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rejestr-fetch",
        description="Download the nursery and children's club registry into CSV files.",
    )
    parser.add_argument(
        "type",
        nargs="?",
        default="ZK",
        help="Registry type: ZK (nurseries), KL (children's clubs) or ALL",
    )
    return parser


def parse_selector(argv: Optional[Sequence[str]] = None) -> list[RegistryType]:
    """
    Parse the command line into the registry types to fetch.

    Exits with status 1 on an unknown type selector.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    registry_types = SELECTORS.get(args.type)
    if registry_types is None:
        parser.exit(1, f"Error: invalid type {args.type!r} (available: {', '.join(SELECTORS)})\n")
    return registry_types


async def run_fetch(registry_types: Sequence[RegistryType], settings: Settings) -> list[FetchSummary]:
    """Fetch each registry type in order, sharing one API client."""
    summaries = []
    async with RegistryClient(settings) as client:
        for registry_type in registry_types:
            job = RegistryFetchJob(client, settings, registry_type)
            summaries.append(await job.run())
    return summaries


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the fetcher."""
    registry_types = parse_selector(argv)

    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)

    try:
        asyncio.run(run_fetch(registry_types, settings))
    except Exception as e:
        logger.error("Fetch failed: %s", e, extra={"error": str(e)}, exc_info=True)
        sys.exit(1)

    logger.info("All done")


if __name__ == "__main__":
    main()
