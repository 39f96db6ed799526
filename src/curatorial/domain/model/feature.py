"""Decoded catalog features (ancestor and child property bags).

A ``CatalogFeature`` is the full record a parent assignment is derived from or
written to. ``wof:supersedes`` / ``wof:superseded_by`` are carried for callers
but never traversed here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

from curatorial.domain.errors import MalformedRecord
from curatorial.domain.model.enums import Currency, ParentSentinel
from curatorial.domain.model.geometry import GeoJSONGeometry, Point, label_point

type HierarchyEntry = Mapping[str, int]
type HierarchyKey = tuple[tuple[str, int], ...]

ID_PROPERTY: Final[str] = "wof:id"
NAME_PROPERTY: Final[str] = "wof:name"
PARENT_PROPERTY: Final[str] = "wof:parent_id"
HIERARCHY_PROPERTY: Final[str] = "wof:hierarchy"
INCEPTION_PROPERTY: Final[str] = "edtf:inception"
CESSATION_PROPERTY: Final[str] = "edtf:cessation"
CURRENT_PROPERTY: Final[str] = "mz:is_current"
SUPERSEDES_PROPERTY: Final[str] = "wof:supersedes"
SUPERSEDED_BY_PROPERTY: Final[str] = "wof:superseded_by"


def hierarchy_key(entry: HierarchyEntry) -> HierarchyKey:
    """Structural identity of a hierarchy entry: every role->id pair, order-free."""

    return tuple(sorted((str(role), int(ancestor)) for role, ancestor in entry.items()))


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class CatalogFeature:
    wof_id: int
    name: str = ""
    parent_id: int = int(ParentSentinel.NONE)
    inception: str = ""
    cessation: str = ""
    currency: Currency = Currency.UNKNOWN
    hierarchy: tuple[HierarchyEntry, ...] = ()
    supersedes: tuple[int, ...] = ()
    superseded_by: tuple[int, ...] = ()
    geometry: GeoJSONGeometry | None = None
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_geojson(
        cls, feature: Mapping[str, Any], *, source: str = "<memory>"
    ) -> CatalogFeature:
        """Decode a GeoJSON feature, raising ``MalformedRecord`` when ``wof:id`` is unusable."""

        props = feature.get("properties")
        if not isinstance(props, Mapping):
            raise MalformedRecord(source, "properties")

        wof_id = require_int(props, ID_PROPERTY, source=source)
        geometry = feature.get("geometry")

        return cls(
            wof_id=wof_id,
            name=str(props.get(NAME_PROPERTY) or ""),
            parent_id=_optional_int(props.get(PARENT_PROPERTY), ParentSentinel.NONE),
            inception=str(props.get(INCEPTION_PROPERTY) or ""),
            cessation=str(props.get(CESSATION_PROPERTY) or ""),
            currency=Currency.from_flag(props.get(CURRENT_PROPERTY)),
            hierarchy=_hierarchy(props.get(HIERARCHY_PROPERTY), source=source),
            supersedes=_id_list(props.get(SUPERSEDES_PROPERTY)),
            superseded_by=_id_list(props.get(SUPERSEDED_BY_PROPERTY)),
            geometry=MappingProxyType(dict(geometry)) if isinstance(geometry, Mapping) else None,
            properties=MappingProxyType(dict(props)),
        )

    @property
    def label_point(self) -> Point | None:
        return label_point(self.properties)

    def __str__(self) -> str:
        return f"{self.wof_id} {self.name}"


def require_int(props: Mapping[str, Any], key: str, *, source: str) -> int:
    if key not in props or props[key] is None:
        raise MalformedRecord(source, key)
    value = props[key]
    if isinstance(value, bool):
        raise MalformedRecord(source, key, f"expected integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(source, key, f"expected integer, got {value!r}") from exc


def _optional_int(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return int(default)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return int(default)


def _id_list(value: object) -> tuple[int, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return ()
    ids: list[int] = []
    for item in value:
        try:
            ids.append(int(item))
        except (TypeError, ValueError):
            continue
    return tuple(ids)


def _hierarchy(value: object, *, source: str) -> tuple[HierarchyEntry, ...]:
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise MalformedRecord(source, HIERARCHY_PROPERTY, "expected a list of mappings")

    entries: list[HierarchyEntry] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            raise MalformedRecord(source, HIERARCHY_PROPERTY, f"unexpected entry {entry!r}")
        try:
            entries.append(MappingProxyType({str(k): int(v) for k, v in entry.items()}))
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(source, HIERARCHY_PROPERTY, str(exc)) from exc
    return tuple(entries)
