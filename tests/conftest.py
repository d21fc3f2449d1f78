import re
from typing import Any

import pytest
import pytest_asyncio
from aioresponses import aioresponses

from rejestr.utils.config import Settings
from rejestr.utils.registry_api import RegistryClient

API_URL = "https://example.com/instytucja/getListaRejestr"


def page_url(page_number: int, registry_type: str = "ZK", page_size: int = 10) -> re.Pattern:
    """Match a registry request for one page, whatever the query parameter order."""
    return re.compile(
        rf"^{re.escape(API_URL)}\?"
        rf"(?=.*\bpageNumber={page_number}(&|$))"
        rf"(?=.*\bpageSize={page_size}(&|$))"
        rf"(?=.*\blistaRejestrType={registry_type}(&|$))"
    )


def make_entry(n: int) -> dict[str, Any]:
    return {
        "identyfikator": 1000 + n,
        "nazwa": f"Żłobek nr {n}",
        "daneAdresowe": {
            "wojewodztwo": "mazowieckie",
            "powiat": "Warszawa",
            "gmina": {"nazwa": "Warszawa", "kod": "146501"},
            "miejscowosc": {"nazwa": "Warszawa"},
            "ulica": {"nazwa": "Marszałkowska"},
            "numerBudynku": str(n),
            "numerLokalu": None,
        },
        "email": f"zlobek{n}@example.com",
        "telefon": "22 123 45 67",
        "liczbaDzieci": 20,
        "liczbaMiejsc": 25,
        "adresWWW": None,
    }


def make_page(first: int, count: int, total_pages: int, total_elements: int) -> dict[str, Any]:
    return {
        "totalPages": total_pages,
        "totalElements": total_elements,
        "size": 10,
        "content": [make_entry(n) for n in range(first, first + count)],
    }


@pytest.fixture
def settings(tmp_path):
    return Settings(
        API_URL=API_URL,
        RETRY_DELAY=0,
        PAGE_DELAY=0,
        SHOW_PROGRESS=False,
        OUTPUT_DIR=str(tmp_path),
    )


@pytest.fixture
def rmock():
    with aioresponses() as m:
        yield m


@pytest_asyncio.fixture
async def client(settings):
    async with RegistryClient(settings) as registry_client:
        yield registry_client


def request_count(rmock: aioresponses) -> int:
    return sum(len(calls) for calls in rmock.requests.values())
