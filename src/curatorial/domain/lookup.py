"""Per-kind lookup facade over a record index.

A ``RecordKind`` declares which properties of a record are alias codes, whether
date-based resolution applies and how results are presented. ``Lookup`` then
composes the index, the temporal resolver and currency filtering for that kind.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from curatorial.domain.errors import MultipleCandidates, NotFound
from curatorial.domain.index import OnceIndex, RecordIndex
from curatorial.domain.model import (
    CatalogRecord,
    CollectionObject,
    Currency,
    Exhibition,
    Gallery,
    PublicArtWork,
    RecordKindName,
)
from curatorial.domain.temporal import TemporalResolver

if TYPE_CHECKING:
    from curatorial.domain.temporal import QueryDate

log = getLogger(__name__)


@dataclass(frozen=True)
class RecordKind[R: CatalogRecord]:
    name: RecordKindName
    label: str
    record_type: type[R]
    alias_codes: Callable[[R], Iterable[str]]
    temporal: bool = False
    sort_key: Callable[[R], Any] | None = None

    def new_index(self) -> RecordIndex[R]:
        return RecordIndex(self.alias_codes, label=self.label)


def _gallery_codes(gallery: Gallery) -> tuple[str, ...]:
    return (str(gallery.wof_id), str(gallery.sfomuseum_id), gallery.map_id)


def _gallery_window(gallery: Gallery) -> str:
    return f"{gallery.inception} - {gallery.cessation}"


def _exhibition_codes(exhibition: Exhibition) -> tuple[str, ...]:
    return (str(exhibition.wof_id), str(exhibition.sfomuseum_id))


def _object_codes(obj: CollectionObject) -> tuple[str, ...]:
    return (str(obj.wof_id), str(obj.sfomuseum_id), obj.accession_number, obj.call_number)


def _publicart_codes(work: PublicArtWork) -> tuple[str, ...]:
    wof_id = str(work.wof_id)
    sfom_id = str(work.sfomuseum_id)
    codes = [wof_id, sfom_id, f"wof:id={wof_id}", f"sfomuseum:object_id={sfom_id}"]
    if work.map_id:
        codes.extend((work.map_id, f"sfomuseum:map_id={work.map_id}"))
    return tuple(codes)


GALLERIES: Final[RecordKind[Gallery]] = RecordKind(
    name=RecordKindName.GALLERIES,
    label="gallery",
    record_type=Gallery,
    alias_codes=_gallery_codes,
    temporal=True,
    sort_key=_gallery_window,
)
EXHIBITIONS: Final[RecordKind[Exhibition]] = RecordKind(
    name=RecordKindName.EXHIBITIONS,
    label="exhibition",
    record_type=Exhibition,
    alias_codes=_exhibition_codes,
)
COLLECTION: Final[RecordKind[CollectionObject]] = RecordKind(
    name=RecordKindName.COLLECTION,
    label="object",
    record_type=CollectionObject,
    alias_codes=_object_codes,
)
PUBLICART: Final[RecordKind[PublicArtWork]] = RecordKind(
    name=RecordKindName.PUBLICART,
    label="public art work",
    record_type=PublicArtWork,
    alias_codes=_publicart_codes,
)

RECORD_KINDS: Final[dict[RecordKindName, RecordKind[Any]]] = {
    kind.name: kind for kind in (GALLERIES, EXHIBITIONS, COLLECTION, PUBLICART)
}


def record_kind(name: str) -> RecordKind[Any]:
    try:
        return RECORD_KINDS[RecordKindName(name)]
    except ValueError as exc:
        valid = ", ".join(sorted(RECORD_KINDS))
        raise ValueError(f"Unknown record kind {name!r}, expected one of: {valid}") from exc


class Lookup[R: CatalogRecord]:
    """Strongly typed lookups for one record kind."""

    def __init__(
        self,
        kind: RecordKind[R],
        index: OnceIndex[R] | RecordIndex[R],
        *,
        resolver: TemporalResolver | None = None,
    ) -> None:
        self.kind = kind
        self._index = index
        self.resolver = resolver or TemporalResolver(label=kind.label)

    @property
    def index(self) -> RecordIndex[R]:
        if isinstance(self._index, OnceIndex):
            return self._index.get()
        return self._index

    def find(self, code: str) -> tuple[R, ...]:
        """All records linked to ``code``; galleries come back ordered by validity window."""

        records = self.index.find(code)
        if self.kind.sort_key is not None:
            return tuple(sorted(records, key=self.kind.sort_key))
        return records

    def append(self, record: R) -> None:
        self.index.append(record)

    def find_all_current(self, code: str) -> tuple[R, ...]:
        return tuple(r for r in self.find(code) if r.currency is Currency.CURRENT)

    def find_current(self, code: str) -> R:
        """The single current record for ``code``.

        Several records flagged current under one code is a data-integrity
        problem and is reported, never resolved silently.
        """

        current = self.find_all_current(code)
        if not current:
            raise NotFound(code, label=self.kind.label)
        if len(current) > 1:
            raise MultipleCandidates(code, label=self.kind.label, count=len(current))
        return current[0]

    def find_all_for_date(self, code: str, query_date: QueryDate) -> tuple[R, ...]:
        self._require_temporal()
        records = self.find(code)
        return self.resolver.resolve_as_of(records, query_date, code=code)  # type: ignore[type-var]

    def find_for_date(self, code: str, query_date: QueryDate) -> R:
        self._require_temporal()
        records = self.find(code)
        return self.resolver.resolve_single_as_of(  # type: ignore[type-var]
            records, query_date, code=code
        )

    def _require_temporal(self) -> None:
        if not self.kind.temporal:
            raise ValueError(f"{self.kind.name} lookups do not support date resolution")


__all__ = [
    "COLLECTION",
    "EXHIBITIONS",
    "GALLERIES",
    "PUBLICART",
    "RECORD_KINDS",
    "Lookup",
    "RecordKind",
    "record_kind",
]
