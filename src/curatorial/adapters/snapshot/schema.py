"""Pydantic models for the precompiled snapshot interchange format.

A snapshot is a JSON array of rows, one per record, keyed by the same
colon-separated property names the GeoJSON corpora use.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from curatorial.domain.errors import IndexBuildFailure
from curatorial.domain.model import (
    CollectionObject,
    Currency,
    Exhibition,
    Gallery,
    PublicArtWork,
    RecordKindName,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


class SnapshotBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Snapshot %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class GalleryRow(SnapshotBaseModel):
    wof_id: int = Field(alias="wof:id")
    sfomuseum_id: int = Field(alias="sfomuseum:id")
    map_id: str = Field(default="", alias="map_id")
    name: str = Field(alias="wof:name")
    inception: str = Field(default="", alias="edtf:inception")
    cessation: str = Field(default="", alias="edtf:cessation")
    is_current: int = Field(default=-1, alias="mz:is_current")

    def to_record(self) -> Gallery:
        return Gallery(
            wof_id=self.wof_id,
            sfomuseum_id=self.sfomuseum_id,
            name=self.name,
            map_id=self.map_id,
            inception=self.inception,
            cessation=self.cessation,
            currency=Currency.from_flag(self.is_current),
        )

    @classmethod
    def from_record(cls, record: Gallery) -> GalleryRow:
        return cls(
            wof_id=record.wof_id,
            sfomuseum_id=record.sfomuseum_id,
            map_id=record.map_id,
            name=record.name,
            inception=record.inception,
            cessation=record.cessation,
            is_current=int(record.currency),
        )


class ExhibitionRow(SnapshotBaseModel):
    wof_id: int = Field(alias="wof:id")
    name: str = Field(default="", alias="wof:name")
    sfomuseum_id: int = Field(alias="sfomuseum:exhibition_id")
    www_id: int = Field(default=0, alias="sfomuseum_www:exhibition_id")
    is_current: int = Field(default=-1, alias="mz:is_current")

    def to_record(self) -> Exhibition:
        return Exhibition(
            wof_id=self.wof_id,
            sfomuseum_id=self.sfomuseum_id,
            name=self.name,
            www_id=self.www_id,
            currency=Currency.from_flag(self.is_current),
        )

    @classmethod
    def from_record(cls, record: Exhibition) -> ExhibitionRow:
        return cls(
            wof_id=record.wof_id,
            name=record.name,
            sfomuseum_id=record.sfomuseum_id,
            www_id=record.www_id,
            is_current=int(record.currency),
        )


class CollectionObjectRow(SnapshotBaseModel):
    wof_id: int = Field(alias="wof:id")
    name: str = Field(alias="wof:name")
    sfomuseum_id: int = Field(alias="sfomuseum:object_id")
    accession_number: str = Field(alias="sfomuseum:accession_number")
    call_number: str | None = Field(default=None, alias="sfomuseum:callnumber")
    is_current: int = Field(default=-1, alias="mz:is_current")

    def to_record(self) -> CollectionObject:
        return CollectionObject(
            wof_id=self.wof_id,
            sfomuseum_id=self.sfomuseum_id,
            name=self.name,
            accession_number=self.accession_number,
            call_number=self.call_number or "",
            currency=Currency.from_flag(self.is_current),
        )

    @classmethod
    def from_record(cls, record: CollectionObject) -> CollectionObjectRow:
        return cls(
            wof_id=record.wof_id,
            name=record.name,
            sfomuseum_id=record.sfomuseum_id,
            accession_number=record.accession_number,
            call_number=record.call_number or None,
            is_current=int(record.currency),
        )


class PublicArtRow(SnapshotBaseModel):
    wof_id: int = Field(alias="wof:id")
    name: str = Field(default="", alias="wof:name")
    sfomuseum_id: int = Field(alias="sfomuseum:object_id")
    map_id: str = Field(default="", alias="sfomuseum:map_id")
    is_current: int = Field(default=-1, alias="mz:is_current")

    def to_record(self) -> PublicArtWork:
        return PublicArtWork(
            wof_id=self.wof_id,
            sfomuseum_id=self.sfomuseum_id,
            name=self.name,
            map_id=self.map_id,
            currency=Currency.from_flag(self.is_current),
        )

    @classmethod
    def from_record(cls, record: PublicArtWork) -> PublicArtRow:
        return cls(
            wof_id=record.wof_id,
            name=record.name,
            sfomuseum_id=record.sfomuseum_id,
            map_id=record.map_id,
            is_current=int(record.currency),
        )


type SnapshotRow = GalleryRow | ExhibitionRow | CollectionObjectRow | PublicArtRow

ROW_MODELS: Final[dict[RecordKindName, type[SnapshotRow]]] = {
    RecordKindName.GALLERIES: GalleryRow,
    RecordKindName.EXHIBITIONS: ExhibitionRow,
    RecordKindName.COLLECTION: CollectionObjectRow,
    RecordKindName.PUBLICART: PublicArtRow,
}

_DOCUMENT: Final[TypeAdapter[list[dict[str, Any]]]] = TypeAdapter(list[dict[str, Any]])


def decode_snapshot(kind: RecordKindName, payload: str | bytes) -> list[Any]:
    """Decode a snapshot document into records.

    A document that is not a JSON array of objects fails the build. A row that
    does not validate is logged and skipped.
    """

    try:
        raw_rows = _DOCUMENT.validate_json(payload)
    except ValidationError as exc:
        raise IndexBuildFailure(f"Invalid {kind} snapshot: {exc}") from exc

    model = ROW_MODELS[kind]
    records: list[Any] = []
    for position, raw in enumerate(raw_rows):
        try:
            row = model.model_validate(raw)
        except ValidationError as exc:
            log.warning("Skipping malformed %s snapshot row %d: %s", kind, position, exc)
            continue
        records.append(row.to_record())
    return records


def encode_snapshot(kind: RecordKindName, records: Iterable[Any]) -> str:
    model = ROW_MODELS[kind]
    rows = [
        model.from_record(record).model_dump(  # type: ignore[arg-type]
            by_alias=True, exclude_none=True
        )
        for record in records
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False) + "\n"
