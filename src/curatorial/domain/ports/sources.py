"""Ports for supplying decoded catalog features."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import threading


@dataclass(frozen=True, slots=True)
class SourcedFeature:
    """A raw GeoJSON feature and where it came from (used in diagnostics)."""

    source: str
    feature: Mapping[str, Any]


@runtime_checkable
class FeatureSource(Protocol):
    """Iterates the features of one corpus, stopping early once ``cancel`` is set."""

    def __call__(self, *, cancel: threading.Event | None = None) -> Iterator[SourcedFeature]: ...


@runtime_checkable
class FeatureReader(Protocol):
    """Loads a single feature by ``wof:id``."""

    def load(self, wof_id: int) -> Mapping[str, Any]: ...


@runtime_checkable
class FeatureWriter(Protocol):
    """Persists an updated feature, returning where it was written."""

    def write(self, feature: Mapping[str, Any]) -> str: ...


__all__ = ["FeatureReader", "FeatureSource", "FeatureWriter", "SourcedFeature"]
