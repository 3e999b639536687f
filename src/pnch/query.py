"""Date and tag filtering over a loaded punch collection.

Filtering runs in two stages and the order matters:

1. **Date union**: a punch is kept if it matches *any* active date bound
   (``since``, the ``from``..``to`` range, the ``last`` rolling window).
2. **Tag intersection**: if a tag is given, only punches carrying exactly
   that tag text survive; untagged punches are dropped.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pnch.clock import Date, Period
from pnch.errors import IncompleteRangeError
from pnch.punches import Punch

DateBound = Callable[[Date], bool]


@dataclass(frozen=True)
class PunchQuery:
    """Filter criteria for listing punches.

    Parameters
    ----------
    since:
        Keep punches dated on or after this date.
    from_date, to_date:
        Inclusive range; both or neither must be given.
    last:
        Keep punches from the last period, counted back from today.
    tag:
        Exact tag text to narrow the date-matched punches to.
    """

    since: Date | None = None
    from_date: Date | None = None
    to_date: Date | None = None
    last: Period | None = None
    tag: str | None = None

    def __post_init__(self) -> None:
        if (self.from_date is None) != (self.to_date is None):
            raise IncompleteRangeError()

    @property
    def has_date_bounds(self) -> bool:
        return self.since is not None or self.from_date is not None or self.last is not None

    def date_bounds(self, today: Date, default_period: Period | None = None) -> list[DateBound]:
        """Return one predicate per active date bound.

        ``default_period`` stands in for ``last`` when the query has no
        date bound of its own.
        """
        bounds: list[DateBound] = []
        if self.since is not None:
            since = self.since
            bounds.append(lambda date: date >= since)
        if self.from_date is not None and self.to_date is not None:
            start, end = self.from_date, self.to_date
            bounds.append(lambda date: start <= date <= end)
        last = self.last if self.has_date_bounds else default_period
        if last is not None:
            cutoff = last.to_date_since(today)
            bounds.append(lambda date: date >= cutoff)
        return bounds


def filter_punches(
    punches: Iterable[Punch],
    query: PunchQuery,
    today: Date,
    default_period: Period | None = None,
) -> list[Punch]:
    """Apply ``query`` to ``punches`` and return the matching ones in order."""
    bounds = query.date_bounds(today, default_period)
    if bounds:
        selected = [p for p in punches if any(bound(p.date) for bound in bounds)]
    else:
        selected = list(punches)
    if query.tag is not None:
        selected = [p for p in selected if p.tag is not None and p.tag.text == query.tag]
    return selected
