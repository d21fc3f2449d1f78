import csv

import pytest

from rejestr.utils.csv_writer import CSV_HEADER, append_entries, count_rows, entry_to_row
from rejestr.utils.schemas import RegistryEntry

from .conftest import make_entry


def entries(first, count):
    return [RegistryEntry.model_validate(make_entry(n)) for n in range(first, first + count)]


def read_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_header_columns():
    assert len(CSV_HEADER) == 15
    assert CSV_HEADER[0] == "ID"
    assert CSV_HEADER[-1] == "Adres WWW"


def test_entry_to_row_flattens_nested_fields():
    row = entry_to_row(RegistryEntry.model_validate(make_entry(7)), 42)

    assert row == [
        42,
        1007,
        "Żłobek nr 7",
        "mazowieckie",
        "Warszawa",
        "Warszawa",
        "Warszawa",
        "Marszałkowska",
        "7",
        None,
        "zlobek7@example.com",
        "22 123 45 67",
        20,
        25,
        None,
    ]


def test_entry_to_row_with_missing_address():
    entry = RegistryEntry.model_validate({"identyfikator": "abc", "daneAdresowe": None})

    row = entry_to_row(entry, 1)

    assert row[:2] == [1, "abc"]
    assert row[2:] == [None] * 13


def test_entry_to_row_with_partial_address():
    entry = RegistryEntry.model_validate(
        {"nazwa": "Klub", "daneAdresowe": {"powiat": "krakowski", "gmina": None, "ulica": {}}}
    )

    row = entry_to_row(entry, 1)

    assert row[4] == "krakowski"
    assert row[5] is None
    assert row[7] is None


def test_append_assigns_ids_from_offset(tmp_path):
    path = tmp_path / "zlobki.csv"

    written = append_entries(path, entries(0, 4), 20)

    rows = read_rows(path)
    assert written == 4
    assert rows[0] == CSV_HEADER
    assert [row[0] for row in rows[1:]] == ["21", "22", "23", "24"]
    assert [row[1] for row in rows[1:]] == ["1000", "1001", "1002", "1003"]


def test_header_written_once_across_flushes(tmp_path):
    path = tmp_path / "kluby.csv"

    append_entries(path, entries(0, 10), 0)
    append_entries(path, entries(10, 10), 10)
    append_entries(path, entries(20, 3), 20)

    rows = read_rows(path)
    assert rows.count(CSV_HEADER) == 1
    assert len(rows) == 24
    assert [int(row[0]) for row in rows[1:]] == list(range(1, 24))


def test_empty_append_is_noop(tmp_path):
    path = tmp_path / "zlobki.csv"

    assert append_entries(path, [], 0) == 0
    assert not path.exists()


def test_append_to_empty_file_writes_header(tmp_path):
    path = tmp_path / "zlobki.csv"
    path.touch()

    append_entries(path, entries(0, 1), 0)

    assert read_rows(path)[0] == CSV_HEADER


def test_missing_values_are_empty_cells(tmp_path):
    path = tmp_path / "zlobki.csv"

    append_entries(path, [RegistryEntry.model_validate({"nazwa": "Bez adresu"})], 0)

    with open(path, encoding="utf-8") as f:
        lines = f.read().split("\n")
    assert lines[1] == "1,,Bez adresu" + "," * 12


def test_values_with_separators_are_quoted(tmp_path):
    path = tmp_path / "zlobki.csv"
    entry = RegistryEntry.model_validate({"nazwa": 'Żłobek "Słoneczko", filia'})

    append_entries(path, [entry], 0)

    assert read_rows(path)[1][2] == 'Żłobek "Słoneczko", filia'


def test_count_rows(tmp_path):
    path = tmp_path / "zlobki.csv"
    append_entries(path, entries(0, 13), 0)

    assert count_rows(path) == 14


def test_count_rows_multiline_value(tmp_path):
    path = tmp_path / "zlobki.csv"
    append_entries(path, [RegistryEntry.model_validate({"nazwa": "Żłobek\nPromyczek"})], 0)

    assert count_rows(path) == 2


def test_count_rows_empty_file(tmp_path):
    path = tmp_path / "zlobki.csv"
    path.touch()

    assert count_rows(path) == 0


def test_count_rows_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        count_rows(tmp_path / "missing.csv")


@pytest.mark.parametrize(
    "address",
    ["brak", ["mazowieckie"], {"gmina": "Warszawa", "ulica": 12, "miejscowosc": None}],
)
def test_entry_to_row_with_unexpected_address_shapes(address):
    entry = RegistryEntry.model_validate({"identyfikator": 5, "daneAdresowe": address})

    row = entry_to_row(entry, 1)

    assert row[:2] == [1, 5]
    assert row[5:8] == [None, None, None]
