"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from curatorial.adapters.geojson import compile_records
from curatorial.adapters.lookup_source import index_builder, parse_lookup_uri
from curatorial.adapters.snapshot import encode_snapshot
from curatorial.config import get_lookup_uri
from curatorial.domain.errors import (
    MalformedRecord,
    MultipleCandidates,
    NotFound,
    UnsupportedLookupSource,
)
from curatorial.domain.hierarchy import HierarchyMerger, ParentAssignment
from curatorial.domain.lookup import Lookup, record_kind
from curatorial.domain.model import (
    CatalogFeature,
    EdtfParseError,
    Gallery,
    RecordKindName,
    UnsupportedGeometryError,
)
from curatorial.domain.model.feature import INCEPTION_PROPERTY, PARENT_PROPERTY
from curatorial.domain.updates import Feature, assign_parent, supersede

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable

    from curatorial.adapters.snapshot import SnapshotClient
    from curatorial.domain.ports import FeatureReader, FeatureSource, FeatureWriter
    from curatorial.domain.temporal import QueryDate

log = getLogger(__name__)

GALLERY_ID_PROPERTY = "sfomuseum:gallery_id"


def build_lookup(
    kind: str,
    uri: str | None = None,
    *,
    snapshot_client: SnapshotClient | None = None,
    cancel: threading.Event | None = None,
) -> Lookup[Any]:
    """Create a lookup for ``kind`` backed by the source ``uri`` names.

    Without ``uri`` the configured source for the kind is used, which defaults
    to the embedded snapshot. The index is built lazily on first query.
    """

    record_type = record_kind(kind)
    effective_uri = uri or get_lookup_uri(record_type.name)
    source = parse_lookup_uri(effective_uri)
    if source.kind != record_type.name:
        raise UnsupportedLookupSource(
            f"Lookup URI {effective_uri!r} does not describe {record_type.name} records"
        )

    log.debug("Using %s lookup source %s", record_type.name, effective_uri)
    index = index_builder(source, snapshot_client=snapshot_client, cancel=cancel)
    return Lookup(record_type, index)


def load_features(reader: FeatureReader, wof_ids: Iterable[int]) -> list[CatalogFeature]:
    return [
        CatalogFeature.from_geojson(reader.load(wof_id), source=str(wof_id)) for wof_id in wof_ids
    ]


def assign_exhibition_gallery(
    exhibition: Mapping[str, Any],
    gallery_ids: Sequence[int],
    *,
    reader: FeatureReader,
    merger: HierarchyMerger | None = None,
) -> tuple[bool, Feature, ParentAssignment]:
    """Parent ``exhibition`` on explicitly chosen gallery features."""

    merger = merger or HierarchyMerger()
    assignment = merger.merge(load_features(reader, gallery_ids))
    changed, updated = assign_parent(exhibition, assignment)
    return changed, updated, assignment


def resolve_parent_for_date(
    galleries: Lookup[Gallery],
    codes: Iterable[str],
    query_date: QueryDate,
    *,
    reader: FeatureReader,
    merger: HierarchyMerger | None = None,
) -> ParentAssignment:
    """Resolve each gallery code as of ``query_date`` and merge the gallery features.

    Raises ``NotFound`` or ``MultipleCandidates`` for the first code that does
    not resolve to exactly one gallery.
    """

    merger = merger or HierarchyMerger()
    gallery_ids: list[int] = []
    for code in codes:
        gallery = galleries.find_for_date(code, query_date)
        log.debug("Resolved gallery %s for %s as of %s", gallery.wof_id, code, query_date)
        gallery_ids.append(gallery.wof_id)
    return merger.merge(load_features(reader, gallery_ids))


@dataclass(slots=True)
class BackfillResult:
    examined: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0


def backfill_exhibition_galleries(
    *,
    exhibitions: FeatureSource,
    galleries: Lookup[Gallery],
    reader: FeatureReader,
    writer: FeatureWriter,
    merger: HierarchyMerger | None = None,
    cancel: threading.Event | None = None,
) -> BackfillResult:
    """Re-derive exhibition parents from their gallery codes and inception dates.

    Each exhibition is handled on its own: a record whose galleries cannot be
    resolved, loaded or written is logged and skipped, and never retried.
    Exhibitions without gallery codes, or whose parent would not change, are
    left alone.
    """

    merger = merger or HierarchyMerger()
    result = BackfillResult()

    for sourced in exhibitions(cancel=cancel):
        result.examined += 1
        props = sourced.feature.get("properties")
        if not isinstance(props, Mapping):
            log.warning("Skipping %s: missing properties", sourced.source)
            result.skipped += 1
            continue

        codes = _gallery_codes(props.get(GALLERY_ID_PROPERTY))
        if not codes:
            result.unchanged += 1
            continue

        exhibition_date = str(props.get(INCEPTION_PROPERTY) or "")
        try:
            assignment = resolve_parent_for_date(
                galleries, codes, exhibition_date, reader=reader, merger=merger
            )
        except (NotFound, MultipleCandidates, EdtfParseError) as exc:
            log.error(
                "Failed to resolve gallery for %s (date=%s), skipping: %s",
                sourced.source,
                exhibition_date,
                exc,
            )
            result.skipped += 1
            continue
        except (KeyError, OSError, MalformedRecord, UnsupportedGeometryError) as exc:
            log.warning(
                "Failed to merge gallery features for %s, skipping: %s", sourced.source, exc
            )
            result.skipped += 1
            continue

        if assignment.parent_id == props.get(PARENT_PROPERTY):
            log.debug("No change to parent ID for %s, skipping", sourced.source)
            result.unchanged += 1
            continue

        changed, updated = assign_parent(sourced.feature, assignment)
        if not changed:
            result.unchanged += 1
            continue

        try:
            target = writer.write(updated)
        except (OSError, MalformedRecord) as exc:
            log.error("Failed to write updates for %s: %s", sourced.source, exc)
            result.skipped += 1
            continue

        log.info("Updated %s: new parent_id=%s", target, assignment.parent_id)
        result.updated += 1

    log.info(
        "Finished exhibition backfill: examined=%s, updated=%s, unchanged=%s, skipped=%s",
        result.examined,
        result.updated,
        result.unchanged,
        result.skipped,
    )
    return result


def supersede_exhibition(
    exhibition: Mapping[str, Any],
    parent_id: int,
    *,
    new_id: int,
    reader: FeatureReader,
) -> tuple[Feature, Feature]:
    """Replace ``exhibition`` with a successor parented on ``parent_id``."""

    parent = CatalogFeature.from_geojson(reader.load(parent_id), source=str(parent_id))
    return supersede(exhibition, parent, new_id=new_id)


def compile_snapshot(
    kind: str,
    sources: Sequence[FeatureSource],
    *,
    cancel: threading.Event | None = None,
) -> str:
    """Compile the interchange snapshot for ``kind`` from GeoJSON corpora."""

    name = RecordKindName(record_kind(kind).name)
    records = compile_records(name, sources, cancel=cancel)
    log.info("Compiled %s %s records", len(records), name)
    return encode_snapshot(name, records)


def _gallery_codes(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return [str(value)]
    if isinstance(value, Sequence):
        return [str(item) for item in value if item is not None]
    return []
