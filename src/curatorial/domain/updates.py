"""Apply resolution outcomes to GeoJSON features.

Updates are dotted paths into the feature (``properties.wof:parent_id``,
``geometry``) so they can be computed once and applied to a raw mapping
without decoding it. Property names contain colons but never dots.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from curatorial.domain.model.feature import (
    CESSATION_PROPERTY,
    CURRENT_PROPERTY,
    HIERARCHY_PROPERTY,
    ID_PROPERTY,
    INCEPTION_PROPERTY,
    PARENT_PROPERTY,
    SUPERSEDED_BY_PROPERTY,
    SUPERSEDES_PROPERTY,
)

if TYPE_CHECKING:
    from curatorial.domain.hierarchy import ParentAssignment
    from curatorial.domain.model import CatalogFeature

type Feature = dict[str, Any]


def assign_properties_if_changed(
    feature: Mapping[str, Any],
    updates: Mapping[str, Any],
) -> tuple[bool, Feature]:
    """Return ``(changed, updated_copy)``; ``feature`` itself is never mutated."""

    updated: Feature = copy.deepcopy(dict(feature))
    changed = False

    for path, value in updates.items():
        parts = path.split(".")
        if not all(parts):
            raise ValueError(f"Invalid update path {path!r}")

        target: dict[str, Any] = updated
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child

        leaf = parts[-1]
        new_value = copy.deepcopy(value)
        if leaf in target and target[leaf] == new_value:
            continue
        target[leaf] = new_value
        changed = True

    return changed, updated


def assign_parent(
    feature: Mapping[str, Any],
    assignment: ParentAssignment,
) -> tuple[bool, Feature]:
    return assign_properties_if_changed(feature, assignment.as_updates())


def supersede(
    feature: Mapping[str, Any],
    parent: CatalogFeature,
    *,
    new_id: int,
) -> tuple[Feature, Feature]:
    """Split ``feature`` into a successor under ``parent`` and a closed predecessor.

    The successor takes ``new_id``, the parent's lineage and inception, the
    parent's raw ``mz:is_current`` value when it has one, and records the
    predecessor in ``wof:supersedes``. The predecessor gains
    ``wof:superseded_by`` and ends on the parent's inception.
    """

    properties = feature.get("properties")
    if not isinstance(properties, Mapping) or ID_PROPERTY not in properties:
        raise ValueError("Feature is missing properties.wof:id")
    old_id = int(properties[ID_PROPERTY])

    successor_updates: dict[str, Any] = {
        "id": new_id,
        f"properties.{ID_PROPERTY}": new_id,
        f"properties.{PARENT_PROPERTY}": parent.wof_id,
        f"properties.{HIERARCHY_PROPERTY}": [dict(entry) for entry in parent.hierarchy],
        f"properties.{INCEPTION_PROPERTY}": parent.inception,
        f"properties.{SUPERSEDES_PROPERTY}": [old_id],
    }
    if CURRENT_PROPERTY in parent.properties:
        successor_updates[f"properties.{CURRENT_PROPERTY}"] = parent.properties[CURRENT_PROPERTY]
    _, successor = assign_properties_if_changed(feature, successor_updates)

    predecessor_updates: dict[str, Any] = {
        f"properties.{SUPERSEDED_BY_PROPERTY}": [new_id],
        f"properties.{CESSATION_PROPERTY}": parent.inception,
    }
    _, predecessor = assign_properties_if_changed(feature, predecessor_updates)

    return successor, predecessor


__all__ = ["Feature", "assign_parent", "assign_properties_if_changed", "supersede"]
