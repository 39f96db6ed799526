"""Error kinds raised by the resolution engine.

``NotFound`` and ``MultipleCandidates`` are resolution outcomes the caller is
expected to handle; ``MalformedRecord`` and ``TemporalParseSkipped`` are
per-record conditions that batch code logs and skips; ``IndexBuildFailure`` is
fatal and cached for the lifetime of the index handle that produced it.
"""

from __future__ import annotations


class CuratorialError(RuntimeError):
    """Base class for resolution engine errors."""


class NotFound(CuratorialError, LookupError):  # noqa: N818
    """No candidate matched ``code``."""

    def __init__(self, code: str, *, label: str = "record") -> None:
        self.code = code
        self.label = label
        super().__init__(f"{label.capitalize()} '{code}' not found")


class MultipleCandidates(CuratorialError, LookupError):  # noqa: N818
    """More than one candidate survived where exactly one was required."""

    def __init__(self, code: str, *, label: str = "record", count: int | None = None) -> None:
        self.code = code
        self.label = label
        self.count = count
        super().__init__(f"Multiple candidates for {label} '{code}'")


class MalformedRecord(CuratorialError, ValueError):  # noqa: N818
    """A required property is missing or invalid in an input record."""

    def __init__(self, source: str, prop: str, detail: str | None = None) -> None:
        self.source = source
        self.prop = prop
        message = f"'{source}' is missing {prop} property"
        if detail:
            message = f"'{source}' has invalid {prop} property: {detail}"
        super().__init__(message)


class TemporalParseSkipped(CuratorialError, ValueError):  # noqa: N818
    """A candidate's validity window could not be compared against a query date."""

    def __init__(self, record: object, value: str, reason: str) -> None:
        self.record = record
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot compare {value!r} for {record}: {reason}")


class IndexBuildFailure(CuratorialError):  # noqa: N818
    """Building an index failed; the failure is cached and re-raised to every caller."""


class UnsupportedLookupSource(CuratorialError, ValueError):  # noqa: N818
    """The lookup source selector could not be understood."""


__all__ = [
    "CuratorialError",
    "IndexBuildFailure",
    "MalformedRecord",
    "MultipleCandidates",
    "NotFound",
    "TemporalParseSkipped",
    "UnsupportedLookupSource",
]
