"""Tests for strict ISO date parsing and day arithmetic."""

from __future__ import annotations

from datetime import date

import pytest

from lunatrack.cycles.dates import (
    InvalidDateFormat,
    add_days,
    diff_days,
    format_date,
    is_iso_date,
    parse_date,
    sort_dates,
)


class TestParseDate:
    def test_parses_valid_date(self) -> None:
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_date_instance_passes_through(self) -> None:
        d = date(2024, 5, 1)
        assert parse_date(d) is d

    @pytest.mark.parametrize(
        "value",
        [
            "2023-02-29",        # not a leap year
            "2024-13-01",
            "2024-04-31",
            "0000-01-01",
            "2024-1-01",
            "20240101",
            "2024-01-01T00:00",
            " 2024-01-01",
            "2024-01-01\n",
            "٢٠٢٤-٠١-٠١",        # non-ASCII digits
            "",
        ],
    )
    def test_rejects_invalid_values(self, value: str) -> None:
        with pytest.raises(InvalidDateFormat):
            parse_date(value)

    def test_error_carries_value(self) -> None:
        with pytest.raises(InvalidDateFormat) as excinfo:
            parse_date("2024-02-30")
        assert excinfo.value.value == "2024-02-30"
        assert isinstance(excinfo.value, ValueError)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidDateFormat):
            parse_date(20240101)  # type: ignore[arg-type]


class TestFormatDate:
    def test_zero_pads_all_parts(self) -> None:
        assert format_date(date(999, 1, 2)) == "0999-01-02"

    def test_inverse_of_parse(self) -> None:
        assert format_date(parse_date("2024-12-31")) == "2024-12-31"


class TestArithmetic:
    def test_diff_days_is_signed(self) -> None:
        a, b = date(2024, 1, 1), date(2024, 1, 29)
        assert diff_days(a, b) == 28
        assert diff_days(b, a) == -28

    def test_diff_days_across_dst_change(self) -> None:
        # US and EU clocks change in March; day counts must not drift.
        assert diff_days(date(2024, 3, 1), date(2024, 3, 31)) == 30
        assert diff_days(date(2024, 10, 20), date(2024, 11, 10)) == 21

    def test_add_days_over_leap_day(self) -> None:
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2023, 2, 28), 1) == date(2023, 3, 1)

    def test_add_days_negative(self) -> None:
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)


class TestOrdering:
    def test_sort_is_chronological(self) -> None:
        values = ["2024-10-01", "2023-12-31", "2024-02-01"]
        assert sort_dates(values) == ["2023-12-31", "2024-02-01", "2024-10-01"]

    def test_is_iso_date_checks_shape_only(self) -> None:
        assert is_iso_date("2024-02-30")
        assert not is_iso_date("2024-2-3")
        assert not is_iso_date(None)
