from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from curatorial.adapters.geojson import DirectoryFeatureSource, GeoJSONDirectoryReader
from curatorial.domain.index import RecordIndex
from curatorial.domain.lookup import GALLERIES, Lookup
from curatorial.domain.model import Currency, Gallery

if TYPE_CHECKING:
    from collections.abc import Callable

DATA_DIR = Path(__file__).resolve().parent / "data"
ARCHITECTURE_DIR = DATA_DIR / "architecture"
EXHIBITIONS_DIR = DATA_DIR / "exhibitions"


@pytest.fixture
def architecture_dir() -> Path:
    return ARCHITECTURE_DIR


@pytest.fixture
def exhibitions_dir() -> Path:
    return EXHIBITIONS_DIR


@pytest.fixture
def architecture_reader() -> GeoJSONDirectoryReader:
    return GeoJSONDirectoryReader([ARCHITECTURE_DIR])


@pytest.fixture
def exhibitions_source() -> DirectoryFeatureSource:
    return DirectoryFeatureSource(EXHIBITIONS_DIR)


@pytest.fixture
def load_geojson() -> Callable[[str], dict[str, Any]]:
    def load(relative: str) -> dict[str, Any]:
        return json.loads((DATA_DIR / relative).read_text(encoding="utf-8"))

    return load


@pytest.fixture
def make_gallery() -> Callable[..., Gallery]:
    def factory(
        wof_id: int,
        *,
        sfomuseum_id: int = 42,
        inception: str = "",
        cessation: str = "",
        currency: Currency = Currency.NOT_CURRENT,
        map_id: str = "",
        name: str | None = None,
    ) -> Gallery:
        return Gallery(
            wof_id=wof_id,
            sfomuseum_id=sfomuseum_id,
            name=name or f"Gallery {sfomuseum_id}",
            map_id=map_id,
            inception=inception,
            cessation=cessation,
            currency=currency,
        )

    return factory


@pytest.fixture
def gallery_42_history(make_gallery: Callable[..., Gallery]) -> tuple[Gallery, Gallery]:
    """Gallery 42 closed and reopened on 2024-06-17; only the reopened record is current."""

    closed = make_gallery(1763588365, inception="2021-11-09", cessation="2024-06-17")
    reopened = make_gallery(
        1914601015, inception="2024-06-17", cessation="..", currency=Currency.CURRENT
    )
    return closed, reopened


@pytest.fixture
def gallery_lookup(gallery_42_history: tuple[Gallery, Gallery]) -> Lookup[Gallery]:
    index: RecordIndex[Gallery] = GALLERIES.new_index()
    index.build(gallery_42_history)
    return Lookup(GALLERIES, index)
