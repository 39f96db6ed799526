from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING, Any

import pytest

from curatorial.adapters.geojson import (
    DirectoryFeatureSource,
    GeoJSONDirectoryReader,
    GeoJSONDirectoryWriter,
    compile_records,
    id_to_relpath,
    is_record_path,
    populate_index,
)
from curatorial.adapters.geojson.properties import (
    exhibition_from_feature,
    gallery_from_feature,
    object_from_feature,
    publicart_from_feature,
)
from curatorial.domain.errors import MalformedRecord
from curatorial.domain.lookup import GALLERIES
from curatorial.domain.model import Currency, RecordKindName

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("1914601015.geojson", True),
        ("1914601015-alt-sfomuseum.geojson", False),
        ("1914601015.geojson~", False),
        ("README.md", False),
    ],
)
def test_is_record_path(tmp_path: Path, name: str, *, expected: bool) -> None:
    assert is_record_path(tmp_path / name) is expected


def test_directory_source_skips_alternates_and_backups(architecture_dir: Path) -> None:
    features = list(DirectoryFeatureSource(architecture_dir)())

    ids = [f.feature["properties"]["wof:id"] for f in features]
    assert sorted(ids) == [
        1729792389,
        1745882461,
        1745882463,
        1763588365,
        1763588451,
        1914601015,
        1914601021,
    ]
    assert all(f.source.endswith(".geojson") for f in features)


def test_directory_source_logs_and_skips_unreadable_files(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "1.geojson").write_text("{not json", encoding="utf-8")
    (tmp_path / "2.geojson").write_text("[]", encoding="utf-8")
    (tmp_path / "3.geojson").write_text(
        json.dumps({"properties": {"wof:id": 3}}), encoding="utf-8"
    )

    features = list(DirectoryFeatureSource(tmp_path)())

    assert [f.feature["properties"]["wof:id"] for f in features] == [3]
    assert caplog.text.count("Skipping unreadable feature") == 2


def test_directory_source_requires_an_existing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list(DirectoryFeatureSource(tmp_path / "missing")())


def test_directory_source_stops_when_cancelled(architecture_dir: Path) -> None:
    cancel = threading.Event()
    cancel.set()

    assert list(DirectoryFeatureSource(architecture_dir)(cancel=cancel)) == []


def _feature(**props: Any) -> dict[str, Any]:
    return {"type": "Feature", "properties": props, "geometry": None}


def test_gallery_decoder_reads_codes_and_window() -> None:
    gallery = gallery_from_feature(
        _feature(
            **{
                "wof:id": 1914601015,
                "wof:name": "Gallery 42",
                "sfomuseum:gallery_id": 42,
                "sfomuseum:map_id": "F-2A",
                "edtf:inception": "2024-06-17",
                "edtf:cessation": "..",
                "mz:is_current": 1,
            }
        ),
        "g.geojson",
    )

    assert gallery.sfomuseum_id == 42
    assert gallery.map_id == "F-2A"
    assert gallery.currency is Currency.CURRENT


def test_gallery_decoder_requires_gallery_id() -> None:
    with pytest.raises(MalformedRecord, match="sfomuseum:gallery_id"):
        gallery_from_feature(_feature(**{"wof:id": 1, "wof:name": "x"}), "g.geojson")


def test_exhibition_decoder_defaults_missing_www_id() -> None:
    exhibition = exhibition_from_feature(
        _feature(**{"wof:id": 1, "sfomuseum:exhibition_id": 9}), "e.geojson"
    )

    assert exhibition.www_id == 0
    assert exhibition.currency is Currency.UNKNOWN


def test_object_decoder_requires_accession_number() -> None:
    with pytest.raises(MalformedRecord, match="sfomuseum:accession_number"):
        object_from_feature(
            _feature(**{"wof:id": 1, "wof:name": "cap", "sfomuseum:object_id": 2}), "o.geojson"
        )


def test_publicart_decoder_rejects_non_integer_ids() -> None:
    with pytest.raises(MalformedRecord, match="expected integer"):
        publicart_from_feature(
            _feature(**{"wof:id": 1, "sfomuseum:object_id": "seven"}), "p.geojson"
        )


def test_decoders_require_properties() -> None:
    with pytest.raises(MalformedRecord, match="properties"):
        gallery_from_feature({"type": "Feature"}, "g.geojson")


def test_populate_index_reads_every_source(architecture_dir: Path, tmp_path: Path) -> None:
    extra = tmp_path / "extra"
    extra.mkdir()
    (extra / "1914601099.geojson").write_text(
        json.dumps(
            _feature(
                **{"wof:id": 1914601099, "wof:name": "Gallery 99", "sfomuseum:gallery_id": 99}
            )
        ),
        encoding="utf-8",
    )
    index = GALLERIES.new_index()

    count = populate_index(
        index,
        RecordKindName.GALLERIES,
        [DirectoryFeatureSource(architecture_dir), DirectoryFeatureSource(extra)],
    )

    assert count == 8
    assert [g.wof_id for g in index.find("99")] == [1914601099]
    assert {g.wof_id for g in index.find("F-2A")} == {1763588365, 1914601015}


def test_populate_index_propagates_source_failures(tmp_path: Path) -> None:
    index = GALLERIES.new_index()

    with pytest.raises(FileNotFoundError):
        populate_index(
            index, RecordKindName.GALLERIES, [DirectoryFeatureSource(tmp_path / "missing")]
        )


def test_populate_index_failure_leaves_the_callers_cancel_event_alone(
    architecture_dir: Path, tmp_path: Path
) -> None:
    cancel = threading.Event()
    sources = [DirectoryFeatureSource(architecture_dir), DirectoryFeatureSource(tmp_path / "gone")]

    with pytest.raises(FileNotFoundError):
        populate_index(GALLERIES.new_index(), RecordKindName.GALLERIES, sources, cancel=cancel)

    assert not cancel.is_set()


def test_populate_index_honours_the_callers_cancel_event(architecture_dir: Path) -> None:
    cancel = threading.Event()
    cancel.set()
    index = GALLERIES.new_index()

    count = populate_index(
        index, RecordKindName.GALLERIES, [DirectoryFeatureSource(architecture_dir)], cancel=cancel
    )

    assert count == 0
    assert len(index) == 0


def test_compile_records_orders_by_id(exhibitions_dir: Path) -> None:
    records = compile_records(RecordKindName.EXHIBITIONS, [DirectoryFeatureSource(exhibitions_dir)])

    ids = [record.wof_id for record in records]
    assert ids == sorted(ids)
    assert len(ids) == 6


def test_reader_loads_by_id_and_caches(architecture_dir: Path) -> None:
    reader = GeoJSONDirectoryReader([architecture_dir])

    feature = reader.load(1914601015)

    assert feature["properties"]["wof:name"] == "Gallery 42 (International Terminal)"
    assert reader.load(1914601015) is feature
    with pytest.raises(KeyError, match="wof:id 1 under"):
        reader.load(1)


def test_id_to_relpath_chunks_digits() -> None:
    assert id_to_relpath(1746382277).as_posix() == "174/638/227/7/1746382277.geojson"
    with pytest.raises(ValueError, match="-1"):
        id_to_relpath(-1)


def test_writer_round_trips_through_reader(tmp_path: Path) -> None:
    writer = GeoJSONDirectoryWriter(tmp_path)
    feature = _feature(**{"wof:id": 1746382277, "wof:parent_id": 1914601015})

    target = writer.write(feature)

    assert target == str(tmp_path / "174/638/227/7/1746382277.geojson")
    assert GeoJSONDirectoryReader([tmp_path]).load(1746382277) == feature
    assert not list(tmp_path.rglob("*.tmp"))


def test_writer_requires_an_id(tmp_path: Path) -> None:
    with pytest.raises(MalformedRecord, match="wof:id"):
        GeoJSONDirectoryWriter(tmp_path).write({"properties": {}})
