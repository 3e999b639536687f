"""Calendar value types, their text grammars, and the clock primitive.

``Date`` and ``Time`` are small frozen value types rather than
``datetime.date`` / ``datetime.time`` because their binary layout allows
values the standard library rejects: ``Date.min()`` is ``0000-00-00`` and
``Time`` reserves ``(255, 255)`` as the "absent" pattern.

Text grammars
-------------
Date
    ``yyyy-mm-dd``
Time
    ``hh:mm``
Period
    ``[n] unit`` where ``n`` defaults to 1 and ``unit`` is one of
    ``day(s)``, ``week(s)``, ``month(s)`` or ``year(s)``.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from enum import Enum
from typing import Final, Protocol

from pnch.errors import FormatError

U8_MAX: Final[int] = 0xFF
U16_MAX: Final[int] = 0xFFFF


def _parse_uint(text: str, maximum: int) -> int:
    """Parse a non-negative decimal integer no larger than ``maximum``."""
    if not text.isascii() or not text.isdigit():
        raise ValueError(text)
    value = int(text)
    if value > maximum:
        raise ValueError(text)
    return value


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True, slots=True)
class Date:
    """A calendar date as stored on disk.

    Parameters
    ----------
    year:
        Year, 0..65535.
    month:
        Month, 1..12 (0 only for ``Date.min()``).
    day:
        Day of month, 1..31 (0 only for ``Date.min()``).
    """

    year: int
    month: int
    day: int

    FORMAT_HINT = "`yyyy-mm-dd` where `yyyy` are years, `mm` are months and `dd` are days"

    @classmethod
    def min(cls) -> "Date":
        """Return the smallest representable date."""
        return cls(0, 0, 0)

    @classmethod
    def max(cls) -> "Date":
        """Return the largest representable date."""
        return cls(U16_MAX, 12, 31)

    @classmethod
    def from_date(cls, value: _dt.date) -> "Date":
        return cls(value.year, value.month, value.day)

    def to_date(self) -> _dt.date:
        """Convert to ``datetime.date``.

        Raises
        ------
        ValueError
            If the date is outside the range ``datetime.date`` supports.
        """
        return _dt.date(self.year, self.month, self.day)

    @classmethod
    def parse(cls, text: str) -> "Date":
        """Parse a ``yyyy-mm-dd`` string.

        Raises
        ------
        FormatError
            If the string does not follow the grammar.
        """
        parts = text.strip().split("-")
        if len(parts) != 3:
            raise FormatError("date", text, cls.FORMAT_HINT)
        try:
            year = _parse_uint(parts[0], U16_MAX)
            month = _parse_uint(parts[1], 12)
            day = _parse_uint(parts[2], 31)
        except ValueError:
            raise FormatError("date", text, cls.FORMAT_HINT) from None
        if month == 0 or day == 0:
            raise FormatError("date", text, cls.FORMAT_HINT)
        return cls(year, month, day)

    def __str__(self) -> str:
        return f"{self.year:04}-{self.month:02}-{self.day:02}"


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True, slots=True)
class Time:
    """A time of day with minute resolution."""

    hours: int
    minutes: int

    FORMAT_HINT = "`hh:mm` where `hh` represents the hours and `mm` represents the minutes"

    @classmethod
    def from_time(cls, value: _dt.time | _dt.datetime) -> "Time":
        return cls(value.hour, value.minute)

    @classmethod
    def parse(cls, text: str) -> "Time":
        """Parse a ``hh:mm`` string.

        Raises
        ------
        FormatError
            If the string does not follow the grammar or is not a valid
            time of day.
        """
        hours_str, sep, minutes_str = text.strip().partition(":")
        if not sep:
            raise FormatError("time", text, cls.FORMAT_HINT)
        try:
            hours = _parse_uint(hours_str, 23)
            minutes = _parse_uint(minutes_str, 59)
        except ValueError:
            raise FormatError("time", text, cls.FORMAT_HINT) from None
        return cls(hours, minutes)

    def minutes_since_midnight(self) -> int:
        return self.hours * 60 + self.minutes

    def __sub__(self, other: "Time") -> int:
        """Return the difference in minutes."""
        if not isinstance(other, Time):
            return NotImplemented
        return self.minutes_since_midnight() - other.minutes_since_midnight()

    def __str__(self) -> str:
        return f"{self.hours:02}:{self.minutes:02}"


def format_minutes(total: int) -> str:
    """Format a duration in minutes as ``h:mm``."""
    sign = "-" if total < 0 else ""
    hours, minutes = divmod(abs(total), 60)
    return f"{sign}{hours}:{minutes:02}"


# ---------------------------------------------------------------------------
# Period
# ---------------------------------------------------------------------------


class PeriodUnit(Enum):
    """Length of one period unit, in days."""

    DAYS = 1
    WEEKS = 7
    MONTHS = 30
    YEARS = 365


_UNIT_NAMES: Final[dict[str, PeriodUnit]] = {
    "day": PeriodUnit.DAYS,
    "days": PeriodUnit.DAYS,
    "week": PeriodUnit.WEEKS,
    "weeks": PeriodUnit.WEEKS,
    "month": PeriodUnit.MONTHS,
    "months": PeriodUnit.MONTHS,
    "year": PeriodUnit.YEARS,
    "years": PeriodUnit.YEARS,
}


@dataclass(frozen=True, slots=True)
class Period:
    """A relative window such as ``2 weeks``.

    Months and years are the fixed approximations of 30 and 365 days.
    """

    count: int
    unit: PeriodUnit = PeriodUnit.DAYS

    FORMAT_HINT = (
        "`n <period>` where `n` is a number and `<period>` is one of "
        "`days`, `weeks`, `months` or `years`"
    )

    @classmethod
    def days(cls, count: int) -> "Period":
        return cls(count, PeriodUnit.DAYS)

    @classmethod
    def weeks(cls, count: int) -> "Period":
        return cls(count, PeriodUnit.WEEKS)

    @classmethod
    def months(cls, count: int) -> "Period":
        return cls(count, PeriodUnit.MONTHS)

    @classmethod
    def years(cls, count: int) -> "Period":
        return cls(count, PeriodUnit.YEARS)

    @classmethod
    def parse(cls, text: str) -> "Period":
        """Parse ``[n] unit``; ``n`` defaults to 1.

        Raises
        ------
        FormatError
            If the count is not a non-negative integer or the unit is unknown.
        """
        count_str, sep, unit_str = text.strip().partition(" ")
        if not sep:
            count_str, unit_str = "1", count_str
        unit = _UNIT_NAMES.get(unit_str.strip().lower())
        if unit is None or not count_str.isascii() or not count_str.isdigit():
            raise FormatError("period", text, cls.FORMAT_HINT)
        return cls(int(count_str), unit)

    def as_days(self) -> int:
        return self.count * self.unit.value

    def to_date_since(self, today: Date) -> Date:
        """Return the date ``self`` before ``today``, clamped to ``Date.min()``."""
        try:
            return Date.from_date(today.to_date() - _dt.timedelta(days=self.as_days()))
        except (ValueError, OverflowError):
            return Date.min()

    def __str__(self) -> str:
        name = self.unit.name.lower()
        return f"{self.count} {name[:-1] if self.count == 1 else name}"


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class Clock(Protocol):
    """Source of the current local date and time."""

    def today(self) -> Date: ...

    def now(self) -> Time: ...


def _local_now() -> _dt.datetime:
    try:
        return _dt.datetime.now().astimezone()
    except (OSError, ValueError, OverflowError):
        return _dt.datetime.now(_dt.timezone.utc)


class SystemClock:
    """Clock backed by the host's local time zone, falling back to UTC."""

    def today(self) -> Date:
        return Date.from_date(_local_now().date())

    def now(self) -> Time:
        return Time.from_time(_local_now())


class FixedClock:
    """Clock that always reports the same moment.

    Parameters
    ----------
    today:
        Date returned by ``today()``.
    now:
        Time returned by ``now()``.
    """

    def __init__(self, today: Date, now: Time) -> None:
        self._today = today
        self._now = now

    def today(self) -> Date:
        return self._today

    def now(self) -> Time:
        return self._now

    def set(self, today: Date | None = None, now: Time | None = None) -> None:
        """Move the clock."""
        if today is not None:
            self._today = today
        if now is not None:
            self._now = now
