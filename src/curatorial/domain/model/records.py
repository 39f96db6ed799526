"""Indexed catalog records, one dataclass per curatorial domain kind.

Records are immutable once created: the index hands out the same instances to
every reader, so nothing downstream may mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol

from curatorial.domain.model.enums import Currency, RecordKindName


class CatalogRecord(Protocol):
    """Structural contract shared by every indexed record."""

    KIND: ClassVar[RecordKindName]

    @property
    def wof_id(self) -> int: ...

    @property
    def name(self) -> str: ...

    @property
    def currency(self) -> Currency: ...


class ValidityWindowed(CatalogRecord, Protocol):
    """A record with an EDTF ``(inception, cessation)`` validity window."""

    @property
    def inception(self) -> str: ...

    @property
    def cessation(self) -> str: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class Gallery:
    """A gallery (architectural space) record."""

    KIND: ClassVar[RecordKindName] = RecordKindName.GALLERIES

    wof_id: int
    sfomuseum_id: int
    name: str
    map_id: str = ""
    inception: str = ""
    cessation: str = ""
    currency: Currency = Currency.UNKNOWN

    @property
    def is_current(self) -> bool:
        return self.currency is Currency.CURRENT

    def __str__(self) -> str:
        return (
            f"{self.wof_id}#{self.sfomuseum_id} {self.name} "
            f"{self.inception}-{self.cessation} ({int(self.currency)})"
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class Exhibition:
    KIND: ClassVar[RecordKindName] = RecordKindName.EXHIBITIONS

    wof_id: int
    sfomuseum_id: int
    name: str
    www_id: int = 0
    currency: Currency = Currency.UNKNOWN

    @property
    def is_current(self) -> bool:
        return self.currency is Currency.CURRENT

    def __str__(self) -> str:
        return f"{self.wof_id} {self.name} FM: {self.sfomuseum_id} WWW: {self.www_id}"


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionObject:
    KIND: ClassVar[RecordKindName] = RecordKindName.COLLECTION

    wof_id: int
    sfomuseum_id: int
    name: str
    accession_number: str = ""
    call_number: str = ""
    currency: Currency = Currency.UNKNOWN

    @property
    def is_current(self) -> bool:
        return self.currency is Currency.CURRENT

    def __str__(self) -> str:
        return f'"{self.name}"  {self.accession_number} {self.wof_id} ({self.sfomuseum_id})'


@dataclass(frozen=True, slots=True, kw_only=True)
class PublicArtWork:
    KIND: ClassVar[RecordKindName] = RecordKindName.PUBLICART

    wof_id: int
    sfomuseum_id: int
    name: str
    map_id: str = ""
    currency: Currency = Currency.UNKNOWN

    @property
    def is_current(self) -> bool:
        return self.currency is Currency.CURRENT

    def __str__(self) -> str:
        return (
            f'"{self.name}" {self.wof_id} ({self.sfomuseum_id}) ({self.map_id}) '
            f"Is current: {int(self.currency)}"
        )
