"""Snapshot interchange adapter: schema, embedded data and remote fetching."""

from __future__ import annotations

from .embedded import load_embedded_records, read_embedded_snapshot
from .remote import SnapshotClient
from .schema import (
    ROW_MODELS,
    CollectionObjectRow,
    ExhibitionRow,
    GalleryRow,
    PublicArtRow,
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    "ROW_MODELS",
    "CollectionObjectRow",
    "ExhibitionRow",
    "GalleryRow",
    "PublicArtRow",
    "SnapshotClient",
    "decode_snapshot",
    "encode_snapshot",
    "load_embedded_records",
    "read_embedded_snapshot",
]
