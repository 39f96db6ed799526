from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest

from curatorial.app import backfill_exhibition_galleries, build_lookup
from curatorial.domain.model import ParentSentinel
from tests.support.fakes import FakeFeatureReader, FakeFeatureSource, RecordingFeatureWriter

if TYPE_CHECKING:
    from curatorial.adapters.geojson import DirectoryFeatureSource, GeoJSONDirectoryReader
    from curatorial.domain.lookup import Lookup


@pytest.fixture
def galleries() -> Lookup[Any]:
    return build_lookup("galleries", "galleries://")


def test_backfill_resolves_each_exhibition_as_of_its_inception(
    galleries: Lookup[Any],
    exhibitions_source: DirectoryFeatureSource,
    architecture_reader: GeoJSONDirectoryReader,
) -> None:
    writer = RecordingFeatureWriter()

    result = backfill_exhibition_galleries(
        exhibitions=exhibitions_source,
        galleries=galleries,
        reader=architecture_reader,
        writer=writer,
    )

    assert (result.examined, result.updated, result.unchanged, result.skipped) == (6, 3, 2, 1)
    written = writer.by_id()
    assert set(written) == {1729791721, 1729791733, 1746382277}

    # a gallery that opens on the exhibition's start date wins
    assert written[1729791721]["properties"]["wof:parent_id"] == 1763588451

    # the reopened, current gallery wins on the shared boundary
    single = written[1746382277]
    assert single["properties"]["wof:parent_id"] == 1914601015
    assert single["properties"]["sfomuseum:post_security"] == 1
    assert single["geometry"]["type"] == "Polygon"

    multiple = written[1729791733]
    assert multiple["properties"]["wof:parent_id"] == ParentSentinel.MULTIPLE
    assert [entry["enclosure_id"] for entry in multiple["properties"]["wof:hierarchy"]] == [
        1763588451,
        1763588365,
    ]
    assert multiple["geometry"] == {
        "type": "MultiPoint",
        "coordinates": [[-122.3852, 37.617], [-122.3895, 37.616]],
    }


def test_backfill_logs_ambiguous_galleries(
    galleries: Lookup[Any],
    exhibitions_source: DirectoryFeatureSource,
    architecture_reader: GeoJSONDirectoryReader,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR, logger="curatorial.app"):
        backfill_exhibition_galleries(
            exhibitions=exhibitions_source,
            galleries=galleries,
            reader=architecture_reader,
            writer=RecordingFeatureWriter(),
        )

    assert "Failed to resolve gallery" in caplog.text
    assert "1914600903" in caplog.text


def test_write_failures_skip_only_that_record(
    galleries: Lookup[Any],
    exhibitions_source: DirectoryFeatureSource,
    architecture_reader: GeoJSONDirectoryReader,
) -> None:
    writer = RecordingFeatureWriter(fail_for=[1746382277])

    result = backfill_exhibition_galleries(
        exhibitions=exhibitions_source,
        galleries=galleries,
        reader=architecture_reader,
        writer=writer,
    )

    assert (result.updated, result.skipped) == (2, 2)
    assert 1746382277 not in writer.by_id()


def test_missing_gallery_feature_is_skipped(
    galleries: Lookup[Any],
    load_geojson: Any,
) -> None:
    exhibition = load_geojson("exhibitions/data/174/638/227/7/1746382277.geojson")
    writer = RecordingFeatureWriter()

    result = backfill_exhibition_galleries(
        exhibitions=FakeFeatureSource([exhibition]),
        galleries=galleries,
        reader=FakeFeatureReader([]),
        writer=writer,
    )

    assert (result.examined, result.skipped) == (1, 1)
    assert writer.written == []


def test_unknown_gallery_code_and_missing_properties_are_skipped(
    galleries: Lookup[Any],
) -> None:
    exhibitions = FakeFeatureSource(
        [
            {
                "properties": {
                    "wof:id": 1,
                    "sfomuseum:gallery_id": [999],
                    "edtf:inception": "2024-01-01",
                }
            },
            {"properties": {"wof:id": 2, "sfomuseum:gallery_id": 42, "edtf:inception": "uuuu"}},
            {"type": "Feature"},
        ]
    )

    result = backfill_exhibition_galleries(
        exhibitions=exhibitions,
        galleries=galleries,
        reader=FakeFeatureReader([]),
        writer=RecordingFeatureWriter(),
    )

    assert (result.examined, result.skipped) == (3, 3)


def test_exhibition_dated_in_year_zero_skips_only_that_record(
    galleries: Lookup[Any],
    load_geojson: Any,
) -> None:
    exhibitions = FakeFeatureSource(
        [
            {"properties": {"wof:id": 3, "sfomuseum:gallery_id": 42, "edtf:inception": "0000-05"}},
            load_geojson("exhibitions/data/174/638/227/7/1746382277.geojson"),
        ]
    )
    gallery = load_geojson("architecture/data/191/460/101/5/1914601015.geojson")
    writer = RecordingFeatureWriter()

    result = backfill_exhibition_galleries(
        exhibitions=exhibitions,
        galleries=galleries,
        reader=FakeFeatureReader([gallery]),
        writer=writer,
    )

    assert (result.examined, result.updated, result.skipped) == (2, 1, 1)
    assert set(writer.by_id()) == {1746382277}
