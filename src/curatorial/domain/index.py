"""Multi-key in-memory index over catalog records.

Records live in an append-only arena and are addressed by integer pointers.
Every alias code maps to an ordered, duplicate-free tuple of pointers. The
arena slot is always filled before a pointer is linked to any code, so a reader
never sees a pointer that does not resolve.

Writers only ever lock the arena (pointer allocation) or a single code's
candidate list; readers take no locks and work from immutable snapshots.
"""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

from curatorial.domain.errors import IndexBuildFailure, NotFound

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

log = getLogger(__name__)

type Pointer = int
type AliasCodes[R] = Callable[[R], Iterable[str]]


class _Candidates:
    """Candidate pointers for one alias code. Grows only; never reorders."""

    __slots__ = ("_lock", "_members", "pointers")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._members: set[Pointer] = set()
        self.pointers: tuple[Pointer, ...] = ()

    def link(self, pointer: Pointer) -> bool:
        with self._lock:
            if pointer in self._members:
                return False
            self._members.add(pointer)
            self.pointers = (*self.pointers, pointer)
            return True


class RecordIndex[R]:
    """Alias code -> candidate records, with idempotent incremental population."""

    def __init__(self, alias_codes: AliasCodes[R], *, label: str = "record") -> None:
        self._alias_codes = alias_codes
        self.label = label
        self._arena: list[R] = []
        self._pointers_by_identity: dict[int, Pointer] = {}
        self._arena_lock = threading.Lock()
        self._table: dict[str, _Candidates] = {}

    def append(self, record: R) -> Pointer:
        """Store ``record`` (once) and link it under each of its alias codes."""

        pointer = self._store(record)
        for code in self._alias_codes(record):
            if not code:
                continue
            entry = self._table.get(code)
            if entry is None:
                entry = self._table.setdefault(code, _Candidates())
            entry.link(pointer)
        return pointer

    def build(
        self,
        records: Iterable[R],
        *,
        cancel: threading.Event | None = None,
    ) -> int:
        """Populate from a closed batch; stops between records once ``cancel`` is set."""

        count = 0
        for record in records:
            if cancel is not None and cancel.is_set():
                log.info("Index build for %s cancelled after %s records", self.label, count)
                break
            self.append(record)
            count += 1
        return count

    def find(self, code: str) -> tuple[R, ...]:
        """Return every record linked to ``code`` in insertion order."""

        entry = self._table.get(code)
        if entry is None:
            raise NotFound(code, label=self.label)
        return tuple(self._arena[pointer] for pointer in entry.pointers)

    def pointers_for(self, code: str) -> tuple[Pointer, ...]:
        entry = self._table.get(code)
        if entry is None:
            raise NotFound(code, label=self.label)
        return entry.pointers

    def record(self, pointer: Pointer) -> R:
        return self._arena[pointer]

    def codes(self) -> tuple[str, ...]:
        return tuple(self._table)

    def records(self) -> Iterator[R]:
        return iter(tuple(self._arena))

    def __contains__(self, code: object) -> bool:
        return code in self._table

    def __len__(self) -> int:
        return len(self._arena)

    def _store(self, record: R) -> Pointer:
        with self._arena_lock:
            pointer = self._pointers_by_identity.get(id(record))
            if pointer is not None:
                return pointer
            pointer = len(self._arena)
            self._arena.append(record)
            self._pointers_by_identity[id(record)] = pointer
            return pointer


class OnceIndex[R]:
    """Lazy, one-shot index construction shared by every caller holding the handle.

    The first ``get`` runs ``builder``; concurrent first callers block until it
    finishes. Success and failure are both cached: a failed build is re-raised
    as the same ``IndexBuildFailure`` to every later caller and never retried.
    """

    def __init__(self, builder: Callable[[], RecordIndex[R]], *, name: str) -> None:
        self.name = name
        self._builder = builder
        self._lock = threading.Lock()
        self._done = False
        self._index: RecordIndex[R] | None = None
        self._error: IndexBuildFailure | None = None

    @property
    def built(self) -> bool:
        return self._done

    def get(self) -> RecordIndex[R]:
        if not self._done:
            with self._lock:
                if not self._done:
                    self._run_builder()
        if self._error is not None:
            raise self._error
        if self._index is None:
            raise IndexBuildFailure(f"{self.name} index builder returned nothing")
        return self._index

    def _run_builder(self) -> None:
        try:
            index = self._builder()
        except IndexBuildFailure as exc:
            self._error = exc
        except Exception as exc:  # noqa: BLE001
            failure = IndexBuildFailure(f"Failed to build {self.name} index: {exc}")
            failure.__cause__ = exc
            self._error = failure
        else:
            self._index = index
            log.info("Built %s index with %s records", self.name, len(index))
        self._done = True
        if self._error is not None:
            log.error("%s", self._error)


__all__ = ["OnceIndex", "Pointer", "RecordIndex"]
