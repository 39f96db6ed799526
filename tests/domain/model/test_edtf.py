from __future__ import annotations

from datetime import date

import pytest

from curatorial.domain.model import EdtfDate, EdtfParseError


@pytest.mark.parametrize(
    ("raw", "lower", "upper"),
    [
        ("2024-06-17", date(2024, 6, 17), date(2024, 6, 17)),
        ("2024-02", date(2024, 2, 1), date(2024, 2, 29)),
        ("2019", date(2019, 1, 1), date(2019, 12, 31)),
        ("195X", date(1950, 1, 1), date(1959, 12, 31)),
        ("19XX", date(1900, 1, 1), date(1999, 12, 31)),
        ("2019~", date(2019, 1, 1), date(2019, 12, 31)),
        ("2021-05?", date(2021, 5, 1), date(2021, 5, 31)),
        ("2021-05-25/2021-11-09", date(2021, 5, 25), date(2021, 11, 9)),
        ("2021/..", date(2021, 1, 1), None),
        ("../2021-03", None, date(2021, 3, 31)),
    ],
)
def test_parse_reduces_to_inclusive_day_bounds(
    raw: str, lower: date | None, upper: date | None
) -> None:
    parsed = EdtfDate.parse(raw)

    assert parsed.lower == lower
    assert parsed.upper == upper
    assert str(parsed) == raw


def test_open_marker_is_unbounded() -> None:
    parsed = EdtfDate.parse("..")

    assert parsed.is_open
    assert parsed.lower is None
    assert parsed.upper is None


@pytest.mark.parametrize("raw", ["", "   ", "uuuu"])
def test_unknown_dates_are_rejected(raw: str) -> None:
    with pytest.raises(EdtfParseError, match="Unknown EDTF date"):
        EdtfDate.parse(raw)


@pytest.mark.parametrize(
    "raw", ["June 2024", "2024-13", "2024-02-30", "19X5-01", "2024-06-17T10:00"]
)
def test_unsupported_or_invalid_dates_are_rejected(raw: str) -> None:
    with pytest.raises(EdtfParseError):
        EdtfDate.parse(raw)


def test_inverted_interval_is_rejected() -> None:
    with pytest.raises(EdtfParseError, match="Inverted"):
        EdtfDate.parse("2024-01-01/2023-01-01")


def test_from_date_is_a_single_day() -> None:
    parsed = EdtfDate.from_date(date(2024, 6, 17))

    assert parsed.raw == "2024-06-17"
    assert parsed.lower == parsed.upper == date(2024, 6, 17)


@pytest.mark.parametrize("raw", ["0000-05", "-0500-01", "0000-01-01", "0000"])
def test_years_outside_the_calendar_raise_parse_errors(raw: str) -> None:
    with pytest.raises(EdtfParseError):
        EdtfDate.parse(raw)
