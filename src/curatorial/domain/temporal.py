"""Temporal resolution of candidates sharing an alias code.

Adjacent validity windows in the catalog routinely share a boundary date: a
gallery that closed on 2024-06-17 and its successor that opened the same day
both "contain" 2024-06-17. Containment alone therefore often leaves more than
one survivor, and a small ordered list of tie-breakers narrows the set without
inventing precision the data does not have:

1. ``prefer_current`` keeps candidates flagged ``mz:is_current == 1``.
2. ``prefer_starting_on`` keeps candidates whose inception equals the query
   date (a record beginning on the boundary beats one ending on it).

The first tie-breaker producing a non-empty subset wins. Tie-breakers are a
policy, not a guarantee: genuinely fuzzy boundaries can survive both, and the
resolver returns every survivor rather than pick one.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from logging import getLogger
from typing import Final

from curatorial.domain.errors import MultipleCandidates, NotFound, TemporalParseSkipped
from curatorial.domain.model import Currency, EdtfDate, EdtfParseError, ValidityWindowed
from curatorial.domain.model.primitives import OPEN

log = getLogger(__name__)

type QueryDate = str | date
type TieBreaker = Callable[[Sequence[ValidityWindowed], EdtfDate], Sequence[ValidityWindowed]]


def prefer_current(
    candidates: Sequence[ValidityWindowed], query: EdtfDate
) -> tuple[ValidityWindowed, ...]:
    del query
    return tuple(c for c in candidates if c.currency is Currency.CURRENT)


def prefer_starting_on(
    candidates: Sequence[ValidityWindowed], query: EdtfDate
) -> tuple[ValidityWindowed, ...]:
    return tuple(c for c in candidates if c.inception.strip() == query.raw)


DEFAULT_TIE_BREAKERS: Final[tuple[TieBreaker, ...]] = (prefer_current, prefer_starting_on)


def parse_query_date(value: QueryDate) -> EdtfDate:
    """Parse a query date; unlike candidate dates, a bad query is the caller's error."""

    query = EdtfDate.from_date(value) if isinstance(value, date) else EdtfDate.parse(value)
    if query.lower is None or query.upper is None:
        raise EdtfParseError(f"Query date must be bounded, got {value!r}")
    return query


def window_contains(record: ValidityWindowed, query: EdtfDate) -> bool:
    """Return whether ``inception <= query <= cessation`` for ``record``.

    An empty or open (``..``) cessation is unbounded. Raises
    ``TemporalParseSkipped`` when either bound cannot be compared.
    """

    try:
        inception = EdtfDate.parse(record.inception)
    except EdtfParseError as exc:
        raise TemporalParseSkipped(record, record.inception, str(exc)) from exc

    cessation_raw = record.cessation.strip()
    if cessation_raw in ("", OPEN):
        cessation = EdtfDate(raw=cessation_raw, lower=None, upper=None)
    else:
        try:
            cessation = EdtfDate.parse(cessation_raw)
        except EdtfParseError as exc:
            raise TemporalParseSkipped(record, record.cessation, str(exc)) from exc

    after_start = (
        inception.lower is None or query.upper is None or inception.lower <= query.upper
    )
    before_end = cessation.upper is None or query.lower is None or query.lower <= cessation.upper
    return after_start and before_end


class TemporalResolver:
    """Narrow candidates to the one(s) valid at a query date."""

    def __init__(
        self,
        *,
        tie_breakers: Sequence[TieBreaker] = DEFAULT_TIE_BREAKERS,
        label: str = "record",
    ) -> None:
        self.tie_breakers = tuple(tie_breakers)
        self.label = label

    def resolve_as_of[R: ValidityWindowed](
        self,
        candidates: Sequence[R],
        query_date: QueryDate,
        *,
        code: str = "",
    ) -> tuple[R, ...]:
        """Return every candidate valid at ``query_date`` after tie-breaking.

        The result may be empty, or hold more than one record when ambiguity
        survives every tie-breaker.
        """

        query = parse_query_date(query_date)
        matching: list[R] = []

        for candidate in candidates:
            try:
                contained = window_contains(candidate, query)
            except TemporalParseSkipped as exc:
                log.debug(
                    "Skipping %s for code=%s date=%s: %s", self.label, code, query, exc.reason
                )
                continue

            if not contained:
                log.debug(
                    "%s does not match date conditions: code=%s date=%s candidate=%s",
                    self.label.capitalize(),
                    code,
                    query,
                    candidate,
                )
                continue

            log.debug(
                "%s matches date conditions: code=%s date=%s candidate=%s",
                self.label.capitalize(),
                code,
                query,
                candidate,
            )
            matching.append(candidate)

        survivors: tuple[R, ...] = tuple(matching)
        if len(survivors) > 1:
            survivors = self._break_ties(survivors, query)

        log.debug("Resolved %s %ss for code=%s date=%s", len(survivors), self.label, code, query)
        return survivors

    def resolve_single_as_of[R: ValidityWindowed](
        self,
        candidates: Sequence[R],
        query_date: QueryDate,
        *,
        code: str = "",
    ) -> R:
        survivors = self.resolve_as_of(candidates, query_date, code=code)
        if not survivors:
            raise NotFound(code, label=self.label)
        if len(survivors) > 1:
            raise MultipleCandidates(code, label=self.label, count=len(survivors))
        return survivors[0]

    def _break_ties[R: ValidityWindowed](
        self, survivors: tuple[R, ...], query: EdtfDate
    ) -> tuple[R, ...]:
        for tie_breaker in self.tie_breakers:
            narrowed = tuple(tie_breaker(survivors, query))
            if narrowed:
                # tie-breakers only ever filter, so the narrowed set is still of type R
                return narrowed  # type: ignore[return-value]
        return survivors


__all__ = [
    "DEFAULT_TIE_BREAKERS",
    "QueryDate",
    "TemporalResolver",
    "TieBreaker",
    "parse_query_date",
    "prefer_current",
    "prefer_starting_on",
    "window_contains",
]
