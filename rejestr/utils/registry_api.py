"""
Registry API Client

Async client for the paginated registry listing endpoint with a bounded,
fixed-delay retry per page.

Usage:
    from rejestr.utils.registry_api import RegistryClient

    async with RegistryClient(settings) as client:
        payload = await client.fetch_page(0, RegistryType.NURSERY)
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp
import orjson
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from rejestr.utils.config import Settings
from rejestr.utils.exceptions import FetchError
from rejestr.utils.schemas import RegistryType

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, orjson.JSONDecodeError)


class RegistryClient:
    """Registry API client holding one aiohttp session for the whole run."""

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None) -> None:
        """Initialize client.

        Args:
            settings: Fetcher settings (URL, page size, timeout, retries)
            session: Existing session to reuse; one is created when omitted
        """
        self.settings = settings
        self.session = session
        self._own_session = session is None

    async def __aenter__(self) -> "RegistryClient":
        if self.session is None:
            self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._own_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def _get_json(self, params: dict[str, Any]) -> Any:
        if self.session is None:
            self.session = aiohttp.ClientSession()
            self._own_session = True

        timeout = aiohttp.ClientTimeout(total=self.settings.REQUEST_TIMEOUT)
        async with self.session.get(self.settings.API_URL, params=params, timeout=timeout) as resp:
            resp.raise_for_status()
            return orjson.loads(await resp.read())

    def _log_retry(self, retry_state: RetryCallState, page_number: int) -> None:
        attempts = self.settings.MAX_RETRIES + 1
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Page fetch failed (attempt %d/%d), retrying in %ss: %s",
            retry_state.attempt_number,
            attempts,
            self.settings.RETRY_DELAY,
            error,
            extra={
                "page_number": page_number,
                "attempt": retry_state.attempt_number,
            },
        )

    async def fetch_page(self, page_number: int, registry_type: RegistryType) -> Any:
        """
        Fetch one page of the registry listing.

        Network errors, timeouts, non-2xx answers and undecodable bodies are
        retried MAX_RETRIES times with a fixed RETRY_DELAY between attempts.

        Args:
            page_number: Zero-based page index
            registry_type: Registry category to list

        Returns:
            Decoded JSON payload of the page

        Raises:
            FetchError: If every attempt failed
        """
        params = {
            "pageNumber": page_number,
            "pageSize": self.settings.PAGE_SIZE,
            "listaRejestrType": registry_type.value,
        }
        attempts = self.settings.MAX_RETRIES + 1

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                stop=stop_after_attempt(attempts),
                wait=wait_fixed(self.settings.RETRY_DELAY),
                sleep=asyncio.sleep,
                before_sleep=lambda state: self._log_retry(state, page_number),
                reraise=True,
            ):
                with attempt:
                    return await self._get_json(params)
        except RETRYABLE_ERRORS as e:
            logger.error(
                "Page fetch failed after %d attempts: page=%d, error=%s",
                attempts,
                page_number,
                e,
            )
            raise FetchError(f"Failed to fetch page {page_number} after {attempts} attempts: {e}") from e
