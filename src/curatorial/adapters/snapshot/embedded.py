"""Precompiled snapshots shipped inside the ``curatorial.data`` package."""

from __future__ import annotations

from importlib import resources
from logging import getLogger
from typing import TYPE_CHECKING, Any

from curatorial.domain.errors import IndexBuildFailure

from .schema import decode_snapshot

if TYPE_CHECKING:
    from curatorial.domain.model import RecordKindName

log = getLogger(__name__)

DATA_PACKAGE = "curatorial.data"


def read_embedded_snapshot(kind: RecordKindName) -> bytes:
    resource = resources.files(DATA_PACKAGE).joinpath(f"{kind}.json")
    try:
        return resource.read_bytes()
    except OSError as exc:
        raise IndexBuildFailure(f"Failed to load local precompiled {kind} data: {exc}") from exc


def load_embedded_records(kind: RecordKindName) -> list[Any]:
    records = decode_snapshot(kind, read_embedded_snapshot(kind))
    log.debug("Loaded %s embedded %s records", len(records), kind)
    return records
