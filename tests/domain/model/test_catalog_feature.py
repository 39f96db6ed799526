from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from curatorial.domain.errors import MalformedRecord
from curatorial.domain.model import CatalogFeature, Currency, ParentSentinel, hierarchy_key

if TYPE_CHECKING:
    from collections.abc import Callable

GALLERY_42 = "architecture/data/191/460/101/5/1914601015.geojson"


def test_from_geojson_decodes_lineage_and_window(
    load_geojson: Callable[[str], dict[str, Any]],
) -> None:
    feature = CatalogFeature.from_geojson(load_geojson(GALLERY_42), source=GALLERY_42)

    assert feature.wof_id == 1914601015
    assert feature.parent_id == 1159396149
    assert feature.inception == "2024-06-17"
    assert feature.cessation == ".."
    assert feature.currency is Currency.CURRENT
    assert [dict(entry) for entry in feature.hierarchy] == [
        {"building_id": 1159396149, "campus_id": 102527513, "enclosure_id": 1914601015}
    ]
    assert feature.label_point == (-122.3895, 37.616)
    assert feature.geometry is not None
    assert feature.geometry["type"] == "Polygon"


def test_from_geojson_defaults_missing_parent_to_sentinel() -> None:
    feature = CatalogFeature.from_geojson({"properties": {"wof:id": 5}})

    assert feature.parent_id == ParentSentinel.NONE
    assert feature.hierarchy == ()
    assert feature.geometry is None
    assert feature.currency is Currency.UNKNOWN


def test_from_geojson_reads_supersession_lists() -> None:
    feature = CatalogFeature.from_geojson(
        {"properties": {"wof:id": 5, "wof:supersedes": [3, "4"], "wof:superseded_by": []}}
    )

    assert feature.supersedes == (3, 4)
    assert feature.superseded_by == ()


@pytest.mark.parametrize(
    "feature",
    [
        {},
        {"properties": {}},
        {"properties": {"wof:id": None}},
        {"properties": {"wof:id": "forty-two"}},
        {"properties": {"wof:id": True}},
    ],
)
def test_from_geojson_requires_usable_id(feature: dict[str, Any]) -> None:
    with pytest.raises(MalformedRecord):
        CatalogFeature.from_geojson(feature, source="broken.geojson")


def test_from_geojson_rejects_malformed_hierarchy() -> None:
    with pytest.raises(MalformedRecord, match="wof:hierarchy"):
        CatalogFeature.from_geojson(
            {"properties": {"wof:id": 1, "wof:hierarchy": ["campus_id"]}}, source="x"
        )


def test_hierarchy_key_ignores_entry_order() -> None:
    first = {"campus_id": 1, "building_id": 2}
    second = {"building_id": 2, "campus_id": 1}

    assert hierarchy_key(first) == hierarchy_key(second)
    assert hierarchy_key(first) != hierarchy_key({"campus_id": 1, "building_id": 3})
