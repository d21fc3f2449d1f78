"""
Pydantic Schemas - Registry API Models

Models for the payloads returned by the nursery registry API. Entries are
loosely structured: every leaf field is optional and kept as-is, only the
nesting is checked.

Usage:
    from rejestr.utils.schemas import PageResult

    page = PageResult.model_validate(payload)
    for entry in page.content:
        print(entry.nazwa)
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistryType(str, Enum):
    """Registry category selector (`listaRejestrType` query parameter)."""

    NURSERY = "ZK"
    CLUB = "KL"

    @property
    def filename(self) -> str:
        return "zlobki.csv" if self is RegistryType.NURSERY else "kluby.csv"

    @property
    def label(self) -> str:
        return "nurseries" if self is RegistryType.NURSERY else "children's clubs"


def _object_or_none(v: Any) -> Any:
    """Nested blocks of an unexpected shape read as missing."""
    return v if isinstance(v, (dict, BaseModel)) else None


class NamedUnit(BaseModel):
    """Administrative unit or street, referenced by name."""

    model_config = ConfigDict(extra="ignore")

    nazwa: Any = None


class Address(BaseModel):
    """Address block (`daneAdresowe`) of a registry entry."""

    model_config = ConfigDict(extra="ignore")

    wojewodztwo: Any = None
    powiat: Any = None
    gmina: Optional[NamedUnit] = None
    miejscowosc: Optional[NamedUnit] = None
    ulica: Optional[NamedUnit] = None
    numerBudynku: Any = None
    numerLokalu: Any = None

    @field_validator("gmina", "miejscowosc", "ulica", mode="before")
    @classmethod
    def unit_must_be_object(cls, v: Any) -> Any:
        return _object_or_none(v)


class RegistryEntry(BaseModel):
    """One nursery or children's club as returned by the API."""

    model_config = ConfigDict(extra="ignore")

    identyfikator: Any = None
    nazwa: Any = None
    daneAdresowe: Optional[Address] = None
    email: Any = None
    telefon: Any = None
    liczbaDzieci: Any = None
    liczbaMiejsc: Any = None
    adresWWW: Any = None

    @field_validator("daneAdresowe", mode="before")
    @classmethod
    def address_must_be_object(cls, v: Any) -> Any:
        return _object_or_none(v)


class PageResult(BaseModel):
    """One page of the registry listing.

    Only the shape of the page itself is checked: `totalPages` must be an
    integral number when present and `content` must be a list. Whether
    `totalPages` is required is up to the caller (only the first page drives
    the loop).
    """

    model_config = ConfigDict(extra="ignore")

    totalPages: Optional[int] = None
    totalElements: Any = None
    size: Any = None
    content: list[RegistryEntry] = Field(default_factory=list)

    @field_validator("totalPages", mode="before")
    @classmethod
    def integral_page_count(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not float(v).is_integer():
            raise ValueError("totalPages must be an integral number")
        return int(v)

    @field_validator("content", mode="before")
    @classmethod
    def null_content_is_empty(cls, v: Any) -> Any:
        """Treat a null `content` field as an empty page and odd items as empty entries."""
        if v is None:
            return []
        if isinstance(v, list):
            return [item if isinstance(item, (dict, BaseModel)) else {} for item in v]
        return v
