"""
CSV Output Utilities

Appends registry entries to the output CSV and reads back how many rows it
already holds. The CSV file is the only persisted state of the fetcher.
"""

import csv
import logging
from pathlib import Path
from typing import Any, Iterable

from rejestr.utils.schemas import RegistryEntry

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "ID",
    "Identyfikator API",
    "Nazwa",
    "Województwo",
    "Powiat",
    "Gmina",
    "Miejscowość",
    "Ulica",
    "Numer Budynku",
    "Numer Lokalu",
    "Email",
    "Telefon",
    "Liczba dzieci",
    "Liczba miejsc",
    "Adres WWW",
]


def _name(unit: Any) -> Any:
    return unit.nazwa if unit is not None else None


def entry_to_row(entry: RegistryEntry, row_id: int) -> list[Any]:
    """
    Flatten a registry entry into the 15 output columns.

    Args:
        entry: Parsed registry entry
        row_id: 1-based sequence id assigned at write time

    Returns:
        Row values in CSV_HEADER order, None for missing values
    """
    address = entry.daneAdresowe
    if address is None:
        address_values = [None] * 7
    else:
        address_values = [
            address.wojewodztwo,
            address.powiat,
            _name(address.gmina),
            _name(address.miejscowosc),
            _name(address.ulica),
            address.numerBudynku,
            address.numerLokalu,
        ]

    return [
        row_id,
        entry.identyfikator,
        entry.nazwa,
        *address_values,
        entry.email,
        entry.telefon,
        entry.liczbaDzieci,
        entry.liczbaMiejsc,
        entry.adresWWW,
    ]


def append_entries(path: str | Path, entries: Iterable[RegistryEntry], offset: int) -> int:
    """
    Append entries to the CSV file, numbering them from offset + 1.

    The header row is written only when the file is new (absent or empty).
    Nothing is opened or created when there are no entries.

    Args:
        path: Output CSV path
        entries: Entries to persist, in order
        offset: Number of records already persisted before these

    Returns:
        Number of rows written

    Raises:
        IOError: If the file cannot be written
    """
    entries = list(entries)
    if not entries:
        return 0

    csv_path = Path(path)

    with open(csv_path, "a", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")

        # Append mode positions at end of file, so 0 means nothing was written yet
        if f.tell() == 0:
            writer.writerow(CSV_HEADER)

        writer.writerows(
            entry_to_row(entry, offset + idx + 1) for idx, entry in enumerate(entries)
        )

    logger.info(
        "Saved %d records to %s (offset %d)",
        len(entries),
        str(csv_path),
        offset,
        extra={"file_path": str(csv_path), "count": len(entries), "offset": offset},
    )
    return len(entries)


def count_rows(path: str | Path) -> int:
    """
    Count CSV rows in a file, header included.

    Rows are counted as parsed records, so quoted values spanning several
    lines still count once.

    Args:
        path: CSV file path

    Returns:
        Number of rows (0 for an empty file)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid CSV
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return sum(1 for _ in csv.reader(f))
    except csv.Error as e:
        raise ValueError(f"Invalid CSV format in output file: {path} - {e}") from e
