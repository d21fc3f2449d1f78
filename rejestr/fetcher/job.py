"""
Registry Fetch Job

Downloads one registry category page by page into its CSV file:

- Page 0 is always fetched first to learn the total page count
- A fresh file gets page 0 written immediately; an existing file is resumed
  from the page matching its row count
- Records are buffered and flushed every FLUSH_EVERY_PAGES pages and on the
  final page
- A fixed PAGE_DELAY sleep follows every page

Usage:
    async with RegistryClient(settings) as client:
        summary = await RegistryFetchJob(client, settings, RegistryType.NURSERY).run()
"""

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from rejestr.utils.config import Settings
from rejestr.utils.csv_writer import append_entries, count_rows
from rejestr.utils.exceptions import InvalidResponseError
from rejestr.utils.registry_api import RegistryClient
from rejestr.utils.schemas import PageResult, RegistryEntry, RegistryType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResumePoint:
    """Where to continue an interrupted download.

    Attributes:
        already_fetched: Records already persisted in the output file
        start_page: First page to fetch
        skip: Leading records of start_page that are already persisted
    """

    already_fetched: int
    start_page: int
    skip: int


@dataclass(frozen=True)
class FetchSummary:
    registry_type: RegistryType
    output_path: Path
    total_records: int
    new_records: int


def compute_resume_point(path: str | Path, page_size: int) -> Optional[ResumePoint]:
    """
    Derive the resume position from an existing output file.

    Args:
        path: Output CSV path
        page_size: Records per API page

    Returns:
        ResumePoint, or None when the file is absent or empty
    """
    csv_path = Path(path)
    if not csv_path.exists():
        return None

    rows = count_rows(csv_path)
    if rows == 0:
        return None

    already_fetched = rows - 1
    start_page = already_fetched // page_size
    return ResumePoint(
        already_fetched=already_fetched,
        start_page=start_page,
        skip=already_fetched - start_page * page_size,
    )


def parse_page(payload: Any, page_number: int) -> PageResult:
    """
    Validate a page payload.

    Raises:
        InvalidResponseError: If the payload is not a page object
    """
    try:
        return PageResult.model_validate(payload)
    except ValidationError as e:
        raise InvalidResponseError(f"Invalid API response for page {page_number}: {e}") from e


class RegistryFetchJob:
    """Resumable download of one registry category into a CSV file."""

    def __init__(
        self,
        client: RegistryClient,
        settings: Settings,
        registry_type: RegistryType,
        output_path: Optional[str | Path] = None,
    ) -> None:
        """
        Initialize fetch job.

        Args:
            client: Registry API client
            settings: Fetcher settings
            registry_type: Registry category to download
            output_path: Target CSV; OUTPUT_DIR/<type filename> when omitted
        """
        self.client = client
        self.settings = settings
        self.registry_type = registry_type
        self.output_path = (
            Path(output_path)
            if output_path is not None
            else Path(settings.OUTPUT_DIR) / registry_type.filename
        )

    async def _fetch_first_page(self) -> PageResult:
        payload = await self.client.fetch_page(0, self.registry_type)
        if not isinstance(payload, dict):
            raise InvalidResponseError("Invalid API response for the first page: not an object")

        first_page = parse_page(payload, 0)
        if first_page.totalPages is None:
            raise InvalidResponseError("Invalid API response for the first page: missing totalPages")
        return first_page

    def _flush(self, buffer: list[RegistryEntry], global_count: int) -> None:
        append_entries(self.output_path, buffer, global_count - len(buffer))

    async def run(self) -> FetchSummary:
        """
        Download every remaining page of the registry category.

        Returns:
            FetchSummary with total and newly fetched record counts

        Raises:
            FetchError: If a page could not be fetched after all retries
            InvalidResponseError: If the API answered with an unexpected payload
            IOError: If the output file cannot be written
        """
        logger.info(
            "Fetching %s registry (%s)",
            self.registry_type.label,
            self.registry_type.value,
            extra={"registry_type": self.registry_type.value, "output_file": str(self.output_path)},
        )

        first_page = await self._fetch_first_page()
        total_pages = first_page.totalPages
        page_size = self.settings.PAGE_SIZE

        resume = compute_resume_point(self.output_path, page_size)
        if resume is not None:
            already_fetched = resume.already_fetched
            start_page = resume.start_page
            skip = resume.skip
            logger.info(
                "Found existing file %s. Records already saved: %d",
                str(self.output_path),
                already_fetched,
            )
            logger.info("Resuming from page %d", start_page)
            if skip and start_page < total_pages:
                logger.warning(
                    "Saved record count is not a multiple of the page size; "
                    "skipping the first %d records of page %d",
                    skip,
                    start_page,
                    extra={"already_fetched": already_fetched, "page_size": page_size},
                )
        else:
            append_entries(self.output_path, first_page.content, 0)
            already_fetched = len(first_page.content)
            start_page = 1
            skip = 0

        buffer: list[RegistryEntry] = []
        global_count = already_fetched
        flush_every = self.settings.FLUSH_EVERY_PAGES

        with logging_redirect_tqdm(), tqdm(
            total=total_pages,
            initial=min(start_page, total_pages),
            unit="page",
            desc=self.registry_type.value,
            leave=False,
            file=sys.stderr,
            disable=not self.settings.SHOW_PROGRESS,
        ) as bar:
            for page_number in range(start_page, total_pages):
                payload = await self.client.fetch_page(page_number, self.registry_type)
                entries = parse_page(payload, page_number).content

                if page_number == start_page and skip:
                    entries = entries[skip:]

                buffer.extend(entries)
                global_count += len(entries)

                bar.update(1)

                if page_number % flush_every == 0 or page_number == total_pages - 1:
                    self._flush(buffer, global_count)
                    buffer = []

                await asyncio.sleep(self.settings.PAGE_DELAY)

        new_records = global_count - already_fetched
        if resume is None:
            # Page 0 was persisted before the loop
            new_records = global_count

        logger.info(
            "Fetched %d records in total (%d new)",
            global_count,
            new_records,
            extra={"registry_type": self.registry_type.value, "total": global_count, "new": new_records},
        )
        return FetchSummary(
            registry_type=self.registry_type,
            output_path=self.output_path,
            total_records=global_count,
            new_records=new_records,
        )
