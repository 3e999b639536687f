"""Unit tests for pnch.clock — Date, Time, Period and the clocks."""
from __future__ import annotations

import pytest

from pnch.clock import Date, FixedClock, Period, PeriodUnit, SystemClock, Time, format_minutes
from pnch.errors import FormatError


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------


class TestDate:
    def test_parse_valid_date(self) -> None:
        assert Date.parse("2024-03-05") == Date(2024, 3, 5)

    def test_str_is_zero_padded(self) -> None:
        assert str(Date(987, 3, 5)) == "0987-03-05"

    @pytest.mark.parametrize(
        "text",
        ["2024/03/05", "2024-03", "2024-13-01", "2024-00-10", "2024-01-32", "abc", "-1-03-05", ""],
    )
    def test_parse_rejects_bad_dates(self, text: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            Date.parse(text)
        assert exc_info.value.kind == "date"
        assert "yyyy-mm-dd" in (exc_info.value.hint or "")

    def test_ordering_is_chronological(self) -> None:
        dates = [Date(2024, 3, 1), Date(2023, 12, 31), Date(2024, 2, 29)]
        assert sorted(dates) == [Date(2023, 12, 31), Date(2024, 2, 29), Date(2024, 3, 1)]

    def test_min_and_max_bound_every_date(self) -> None:
        assert Date.min() < Date(1, 1, 1) < Date(2024, 1, 1) < Date.max()


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class TestTime:
    def test_parse_valid_time(self) -> None:
        assert Time.parse("09:30") == Time(9, 30)

    def test_parse_accepts_single_digit_hours(self) -> None:
        assert Time.parse("7:05") == Time(7, 5)

    def test_str_is_zero_padded(self) -> None:
        assert str(Time(9, 5)) == "09:05"

    @pytest.mark.parametrize("text", ["9", "24:00", "12:60", "ab:cd", ":", "12:3x"])
    def test_parse_rejects_bad_times(self, text: str) -> None:
        with pytest.raises(FormatError):
            Time.parse(text)

    def test_subtraction_gives_minutes(self) -> None:
        assert Time(10, 0) - Time(9, 15) == 45
        assert Time(9, 0) - Time(10, 0) == -60

    def test_ordering(self) -> None:
        assert Time(8, 30) < Time(9, 0) < Time(9, 1)


class TestFormatMinutes:
    @pytest.mark.parametrize(
        "minutes, expected", [(0, "0:00"), (75, "1:15"), (600, "10:00"), (-5, "-0:05")]
    )
    def test_format(self, minutes: int, expected: str) -> None:
        assert format_minutes(minutes) == expected


# ---------------------------------------------------------------------------
# Period
# ---------------------------------------------------------------------------


class TestPeriodParse:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2 weeks", Period.weeks(2)),
            ("1 week", Period.weeks(1)),
            ("day", Period.days(1)),
            ("days", Period.days(1)),
            ("3 months", Period.months(3)),
            ("year", Period.years(1)),
            ("0 days", Period.days(0)),
        ],
    )
    def test_valid(self, text: str, expected: Period) -> None:
        assert Period.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "2 fortnights", "x days", "-1 days", "2.5 weeks"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            Period.parse(text)
        assert exc_info.value.kind == "period"


class TestPeriodArithmetic:
    @pytest.mark.parametrize(
        "period, days",
        [
            (Period.days(5), 5),
            (Period.weeks(2), 14),
            (Period.months(1), 30),
            (Period.years(2), 730),
        ],
    )
    def test_as_days(self, period: Period, days: int) -> None:
        assert period.as_days() == days

    def test_default_unit_is_days(self) -> None:
        assert Period(3).unit is PeriodUnit.DAYS

    def test_to_date_since(self) -> None:
        assert Period.days(14).to_date_since(Date(2024, 3, 15)) == Date(2024, 3, 1)
        assert Period.weeks(1).to_date_since(Date(2024, 3, 5)) == Date(2024, 2, 27)

    def test_to_date_since_clamps_to_min(self) -> None:
        assert Period.years(10_000).to_date_since(Date(2024, 3, 15)) == Date.min()

    def test_str(self) -> None:
        assert str(Period.weeks(2)) == "2 weeks"
        assert str(Period.days(1)) == "1 day"


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class TestClocks:
    def test_system_clock_returns_value_types(self) -> None:
        clock = SystemClock()
        today = clock.today()
        now = clock.now()
        assert isinstance(today, Date)
        assert 1 <= today.month <= 12
        assert isinstance(now, Time)
        assert 0 <= now.hours < 24

    def test_fixed_clock_can_move(self) -> None:
        clock = FixedClock(Date(2024, 1, 1), Time(8, 0))
        clock.set(now=Time(17, 30))
        assert clock.today() == Date(2024, 1, 1)
        assert clock.now() == Time(17, 30)
