"""Domain primitives: the EDTF date value object.

Only the subset of the Extended Date/Time Format used by the catalog is
understood: calendar dates at year, month or day precision, unspecified
trailing digits (``195X``, ``19XX``), the ``?``/``~``/``%`` qualifiers,
``a/b`` intervals, the open marker ``..`` and the unknown marker ``uuuu``.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Final

OPEN: Final[str] = ".."
UNKNOWN: Final[str] = "uuuu"

_QUALIFIERS: Final[str] = "?~%"
_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<year>-?[0-9X]{4})(?:-(?P<month>[0-9]{2}))?(?:-(?P<day>[0-9]{2}))?$"
)


class EdtfParseError(ValueError):
    """Raised when an EDTF string cannot be turned into calendar bounds."""


@dataclass(frozen=True, slots=True)
class EdtfDate:
    """An EDTF value reduced to an inclusive ``[lower, upper]`` range of days.

    ``None`` on either side means the range is open in that direction.
    """

    raw: str
    lower: date | None
    upper: date | None

    @classmethod
    def parse(cls, value: str) -> EdtfDate:
        text = value.strip()
        if not text or text == UNKNOWN:
            raise EdtfParseError(f"Unknown EDTF date {value!r}")
        if text == OPEN:
            return cls(raw=text, lower=None, upper=None)

        if "/" in text:
            start, _, end = text.partition("/")
            lower = None if start in ("", OPEN) else _bounds(start)[0]
            upper = None if end in ("", OPEN) else _bounds(end)[1]
            if lower is not None and upper is not None and lower > upper:
                raise EdtfParseError(f"Inverted EDTF interval {value!r}")
            return cls(raw=text, lower=lower, upper=upper)

        lower, upper = _bounds(text)
        return cls(raw=text, lower=lower, upper=upper)

    @classmethod
    def from_date(cls, value: date) -> EdtfDate:
        return cls(raw=value.isoformat(), lower=value, upper=value)

    @property
    def is_open(self) -> bool:
        return self.lower is None and self.upper is None

    def __str__(self) -> str:
        return self.raw


def _bounds(text: str) -> tuple[date, date]:
    stripped = text.rstrip(_QUALIFIERS).lstrip(_QUALIFIERS)
    match = _DATE_PATTERN.match(stripped)
    if match is None:
        raise EdtfParseError(f"Unsupported EDTF date {text!r}")

    year_text = match["year"]
    month_text = match["month"]
    day_text = match["day"]

    if "X" in year_text:
        if month_text is not None or day_text is not None:
            raise EdtfParseError(f"Unsupported EDTF date {text!r}")
        low_year = int(year_text.replace("X", "0"))
        high_year = int(year_text.replace("X", "9"))
        return _year_range(low_year, high_year, text)

    year = int(year_text)
    if month_text is None:
        return _year_range(year, year, text)

    month = int(month_text)
    if not 1 <= month <= 12:
        raise EdtfParseError(f"Invalid month in EDTF date {text!r}")
    try:
        if day_text is None:
            last_day = calendar.monthrange(year, month)[1]
            return date(year, month, 1), date(year, month, last_day)
        day = date(year, month, int(day_text))
    except ValueError as exc:
        raise EdtfParseError(f"Invalid EDTF date {text!r}") from exc
    return day, day


def _year_range(low: int, high: int, text: str) -> tuple[date, date]:
    try:
        return date(low, 1, 1), date(high, 12, 31)
    except ValueError as exc:
        raise EdtfParseError(f"Year out of range in EDTF date {text!r}") from exc
