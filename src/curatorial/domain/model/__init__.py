"""Public domain model surface."""

from __future__ import annotations

from curatorial.domain.model.enums import Currency, ParentSentinel, RecordKindName
from curatorial.domain.model.feature import (
    CatalogFeature,
    HierarchyEntry,
    HierarchyKey,
    hierarchy_key,
)
from curatorial.domain.model.geometry import (
    GeoJSONGeometry,
    Point,
    UnsupportedGeometryError,
    label_point,
    multipoint_geometry,
    representative_point,
)
from curatorial.domain.model.primitives import EdtfDate, EdtfParseError
from curatorial.domain.model.records import (
    CatalogRecord,
    CollectionObject,
    Exhibition,
    Gallery,
    PublicArtWork,
    ValidityWindowed,
)

__all__ = [  # noqa: RUF022
    # records
    "CatalogRecord",
    "ValidityWindowed",
    "Gallery",
    "Exhibition",
    "CollectionObject",
    "PublicArtWork",
    # features
    "CatalogFeature",
    "HierarchyEntry",
    "HierarchyKey",
    "hierarchy_key",
    # geometry
    "GeoJSONGeometry",
    "Point",
    "UnsupportedGeometryError",
    "label_point",
    "multipoint_geometry",
    "representative_point",
    # enums
    "Currency",
    "ParentSentinel",
    "RecordKindName",
    # primitives
    "EdtfDate",
    "EdtfParseError",
]
