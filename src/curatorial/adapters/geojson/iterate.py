"""Walk WOF-style GeoJSON corpora on disk.

A corpus is a directory tree of ``<id>.geojson`` files. Alternate geometries
(``<id>-alt-<label>.geojson``) and editor backups (``*~``) are never records.
"""

from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from curatorial.domain.errors import MalformedRecord
from curatorial.domain.ports import SourcedFeature

from .properties import decoder_for

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence

    from curatorial.domain.index import RecordIndex
    from curatorial.domain.model import RecordKindName
    from curatorial.domain.ports import FeatureSource

log = getLogger(__name__)

GEOJSON_SUFFIX = ".geojson"
ALT_MARKER = "-alt-"


def is_record_path(path: Path) -> bool:
    name = path.name
    if name.endswith("~"):
        return False
    if not name.endswith(GEOJSON_SUFFIX):
        return False
    return ALT_MARKER not in name


def iter_record_paths(root: Path) -> Iterator[Path]:
    for path in sorted(root.rglob(f"*{GEOJSON_SUFFIX}*")):
        if path.is_file() and is_record_path(path):
            yield path


def read_feature(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise MalformedRecord(str(path), "feature", "expected a JSON object")
    return payload


class DirectoryFeatureSource:
    """Yields every record feature below ``root``; unreadable files are logged and skipped."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __call__(self, *, cancel: threading.Event | None = None) -> Iterator[SourcedFeature]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Corpus directory does not exist: {self.root}")

        for path in iter_record_paths(self.root):
            if cancel is not None and cancel.is_set():
                log.info("Stopped reading %s: cancelled", self.root)
                return
            try:
                feature = read_feature(path)
            except (OSError, json.JSONDecodeError, MalformedRecord) as exc:
                log.warning("Skipping unreadable feature %s: %s", path, exc)
                continue
            yield SourcedFeature(source=str(path), feature=feature)

    def __repr__(self) -> str:
        return f"DirectoryFeatureSource({str(self.root)!r})"


def decode_records(
    kind: RecordKindName,
    features: Iterable[SourcedFeature],
) -> Iterator[Any]:
    decode = decoder_for(kind)
    for sourced in features:
        try:
            yield decode(sourced.feature, sourced.source)
        except MalformedRecord as exc:
            log.warning("Skipping malformed %s record: %s", kind, exc)


def populate_index(
    index: RecordIndex[Any],
    kind: RecordKindName,
    sources: Sequence[FeatureSource],
    *,
    cancel: threading.Event | None = None,
) -> int:
    """Append every decodable record from ``sources``, one worker thread per source.

    Returns the number of records appended. Errors raised by a source itself
    (as opposed to a single bad record) propagate once every worker has stopped.
    """

    stop = _LinkedEvent(cancel)

    def consume(source: FeatureSource) -> int:
        count = 0
        for record in decode_records(kind, source(cancel=stop)):
            if stop.is_set():
                break
            index.append(record)
            count += 1
        log.debug("Indexed %s %s records from %r", count, kind, source)
        return count

    if not sources:
        return 0

    with ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix=f"index-{kind}") as pool:
        futures = [pool.submit(consume, source) for source in sources]
        try:
            return sum(future.result() for future in futures)
        except BaseException:
            stop.set()
            raise


class _LinkedEvent(threading.Event):
    """Set on its own, or whenever the caller's event is set; never sets the caller's."""

    def __init__(self, parent: threading.Event | None) -> None:
        super().__init__()
        self._parent = parent

    def is_set(self) -> bool:
        return super().is_set() or (self._parent is not None and self._parent.is_set())


def compile_records(
    kind: RecordKindName,
    sources: Sequence[FeatureSource],
    *,
    cancel: threading.Event | None = None,
) -> list[Any]:
    """Decode every record from ``sources`` into a list ordered by ``wof:id``."""

    records: list[Any] = []
    for source in sources:
        records.extend(decode_records(kind, source(cancel=cancel)))
    records.sort(key=lambda record: record.wof_id)
    return records


class GeoJSONDirectoryReader:
    """Loads features by ``wof:id`` from one or more corpus directories.

    The id-to-path table is built on first use by scanning file names, so
    features are only parsed when asked for. Loaded features are cached.
    """

    def __init__(self, roots: Iterable[str | Path]) -> None:
        self.roots = tuple(Path(root) for root in roots)
        self._paths: dict[int, Path] | None = None
        self._cache: dict[int, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, wof_id: int) -> Mapping[str, Any]:
        cached = self._cache.get(wof_id)
        if cached is not None:
            return cached

        path = self._path_table().get(wof_id)
        if path is None:
            roots = ", ".join(map(str, self.roots))
            raise KeyError(f"No feature for wof:id {wof_id} under {roots}")

        feature = read_feature(path)
        self._cache[wof_id] = feature
        return feature

    def _path_table(self) -> dict[int, Path]:
        with self._lock:
            if self._paths is None:
                paths: dict[int, Path] = {}
                for root in self.roots:
                    for path in iter_record_paths(root):
                        stem = path.name.removesuffix(GEOJSON_SUFFIX)
                        if stem.isdigit():
                            paths.setdefault(int(stem), path)
                self._paths = paths
            return self._paths
