"""Merge ancestor lineages into a single parent assignment."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Protocol

from curatorial.domain.model import (
    ParentSentinel,
    hierarchy_key,
    label_point,
    multipoint_geometry,
    representative_point,
)
from curatorial.domain.model.feature import HIERARCHY_PROPERTY, PARENT_PROPERTY

if TYPE_CHECKING:
    from curatorial.domain.model import GeoJSONGeometry, HierarchyEntry, HierarchyKey, Point

DEFAULT_PASSTHROUGH_PROPERTIES: Final[tuple[str, ...]] = ("sfomuseum:post_security",)


class LineageSource(Protocol):
    """An ancestor candidate: an id, its lineage and where it sits on the map."""

    @property
    def wof_id(self) -> int: ...

    @property
    def hierarchy(self) -> tuple[HierarchyEntry, ...]: ...

    @property
    def geometry(self) -> GeoJSONGeometry | None: ...

    @property
    def properties(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class ParentAssignment:
    """Outcome of merging zero, one or many ancestor candidates."""

    parent_id: int
    hierarchy: tuple[HierarchyEntry, ...] = ()
    geometry: GeoJSONGeometry | None = None
    passthrough: Mapping[str, Any] = field(default_factory=dict)
    candidate_ids: tuple[int, ...] = ()

    @property
    def has_parent(self) -> bool:
        return self.parent_id != ParentSentinel.NONE

    @property
    def is_ambiguous(self) -> bool:
        return self.parent_id == ParentSentinel.MULTIPLE

    def as_updates(self) -> dict[str, Any]:
        """Render dotted-path property updates for a child GeoJSON feature.

        A cleared geometry (no candidates) leaves the child's geometry alone.
        """

        updates: dict[str, Any] = {
            f"properties.{PARENT_PROPERTY}": int(self.parent_id),
            f"properties.{HIERARCHY_PROPERTY}": [dict(entry) for entry in self.hierarchy],
        }
        for key, value in self.passthrough.items():
            updates[f"properties.{key}"] = copy.deepcopy(value)
        if self.geometry is not None:
            updates["geometry"] = copy.deepcopy(dict(self.geometry))
        return updates


def merge_hierarchies(lineages: Iterable[Iterable[HierarchyEntry]]) -> tuple[HierarchyEntry, ...]:
    """Union of hierarchy entries in first-seen order, deduplicated structurally."""

    seen: set[HierarchyKey] = set()
    merged: list[HierarchyEntry] = []
    for lineage in lineages:
        for entry in lineage:
            key = hierarchy_key(entry)
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return tuple(merged)


def derived_point(candidate: LineageSource) -> Point:
    """One point per candidate: its label point, else the centroid of its geometry."""

    point = label_point(candidate.properties)
    if point is not None:
        return point
    return representative_point(candidate.geometry)


class HierarchyMerger:
    def __init__(
        self,
        *,
        passthrough_properties: Iterable[str] = DEFAULT_PASSTHROUGH_PROPERTIES,
    ) -> None:
        self.passthrough_properties = tuple(passthrough_properties)

    def merge(self, candidates: Iterable[LineageSource]) -> ParentAssignment:
        """Combine ancestor candidates into a parent assignment.

        - no candidates -> parent ``-1``, empty hierarchy, no geometry
        - one candidate -> its id, its hierarchy verbatim, its geometry and
          pass-through properties
        - several candidates -> parent ``-4``, the structural union of their
          hierarchies and a MultiPoint of one derived point per candidate

        The sentinel follows the number of candidates given, repeats included.
        A repeated candidate adds its hierarchy entries only once.
        """

        given = tuple(candidates)

        if not given:
            return ParentAssignment(parent_id=int(ParentSentinel.NONE))

        if len(given) == 1:
            candidate = given[0]
            return ParentAssignment(
                parent_id=candidate.wof_id,
                hierarchy=tuple(candidate.hierarchy),
                geometry=candidate.geometry,
                passthrough={
                    key: candidate.properties[key]
                    for key in self.passthrough_properties
                    if key in candidate.properties
                },
                candidate_ids=(candidate.wof_id,),
            )

        return ParentAssignment(
            parent_id=int(ParentSentinel.MULTIPLE),
            hierarchy=merge_hierarchies(candidate.hierarchy for candidate in given),
            geometry=multipoint_geometry([derived_point(candidate) for candidate in given]),
            candidate_ids=tuple(candidate.wof_id for candidate in given),
        )


__all__ = [
    "DEFAULT_PASSTHROUGH_PROPERTIES",
    "HierarchyMerger",
    "LineageSource",
    "ParentAssignment",
    "derived_point",
    "merge_hierarchies",
]
