"""Select and build lookup indices from a source URI.

``<kind>://`` uses the embedded snapshot, ``<kind>://remote`` (or ``github``)
downloads the published snapshot, and ``<kind>://iterator?source=DIR`` builds
the index live from one or more GeoJSON corpora. Every mode yields the same
index for the same underlying data.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlsplit

from curatorial.domain.errors import UnsupportedLookupSource
from curatorial.domain.index import OnceIndex
from curatorial.domain.lookup import RECORD_KINDS
from curatorial.domain.model import RecordKindName

from .geojson import DirectoryFeatureSource, populate_index
from .snapshot import SnapshotClient, load_embedded_records

if TYPE_CHECKING:
    from curatorial.domain.index import RecordIndex
    from curatorial.domain.lookup import RecordKind

log = getLogger(__name__)


class SourceMode(StrEnum):
    EMBEDDED = "embedded"
    REMOTE = "remote"
    ITERATOR = "iterator"


_HOST_MODES = {
    "": SourceMode.EMBEDDED,
    "remote": SourceMode.REMOTE,
    "github": SourceMode.REMOTE,
    "iterator": SourceMode.ITERATOR,
}


@dataclass(frozen=True, slots=True)
class LookupSource:
    kind: RecordKindName
    mode: SourceMode
    sources: tuple[str, ...] = ()


def parse_lookup_uri(uri: str) -> LookupSource:
    parts = urlsplit(uri)
    try:
        kind = RecordKindName(parts.scheme)
    except ValueError as exc:
        raise UnsupportedLookupSource(f"Unknown record kind in lookup URI {uri!r}") from exc

    mode = _HOST_MODES.get(parts.netloc)
    if mode is None:
        raise UnsupportedLookupSource(f"Unsupported lookup source {parts.netloc!r} in {uri!r}")

    sources = tuple(parse_qs(parts.query).get("source", ()))
    if mode is SourceMode.ITERATOR and not sources:
        raise UnsupportedLookupSource(f"Iterator lookup URI {uri!r} names no source")
    return LookupSource(kind=kind, mode=mode, sources=sources)


def index_builder(
    source: LookupSource,
    *,
    snapshot_client: SnapshotClient | None = None,
    cancel: threading.Event | None = None,
) -> OnceIndex[Any]:
    """Return an unbuilt index handle for ``source``; nothing is read until first use."""

    kind: RecordKind[Any] = RECORD_KINDS[source.kind]

    def build() -> RecordIndex[Any]:
        index = kind.new_index()
        match source.mode:
            case SourceMode.EMBEDDED:
                index.build(load_embedded_records(source.kind), cancel=cancel)
            case SourceMode.REMOTE:
                client = snapshot_client or SnapshotClient()
                index.build(client.fetch_records(source.kind), cancel=cancel)
            case SourceMode.ITERATOR:
                corpora = [DirectoryFeatureSource(path) for path in source.sources]
                populate_index(index, source.kind, corpora, cancel=cancel)
        return index

    return OnceIndex(build, name=f"{source.kind} ({source.mode})")


__all__ = ["LookupSource", "SourceMode", "index_builder", "parse_lookup_uri"]
