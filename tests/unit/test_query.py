"""Unit tests for pnch.query — the two-stage date union / tag filter."""
from __future__ import annotations

import pytest

from pnch.clock import Date, Period, Time
from pnch.errors import IncompleteRangeError
from pnch.punches import Punch
from pnch.query import PunchQuery, filter_punches
from pnch.tags import Tag

_TODAY = Date(2024, 3, 15)
_BUG = Tag(0, "BUG-1")
_OPS = Tag(1, "OPS")


def _punch(punch_id: int, date: Date, tag: Tag | None = None) -> Punch:
    return Punch(punch_id, date, Time(9, 0), Time(10, 0), tag, "work")


@pytest.fixture()
def punches() -> list[Punch]:
    return [
        _punch(0, Date(2023, 12, 20), _BUG),
        _punch(1, Date(2024, 1, 10)),
        _punch(2, Date(2024, 2, 5), _OPS),
        _punch(3, Date(2024, 3, 10), _BUG),
        _punch(4, Date(2024, 3, 14)),
    ]


def _ids(result: list[Punch]) -> list[int]:
    return [p.id for p in result]


class TestQueryValidation:
    def test_from_without_to(self) -> None:
        with pytest.raises(IncompleteRangeError):
            PunchQuery(from_date=Date(2024, 1, 1))

    def test_to_without_from(self) -> None:
        with pytest.raises(IncompleteRangeError):
            PunchQuery(to_date=Date(2024, 1, 1))

    def test_complete_range(self) -> None:
        query = PunchQuery(from_date=Date(2024, 1, 1), to_date=Date(2024, 1, 31))
        assert query.has_date_bounds


class TestDateUnion:
    def test_since(self, punches: list[Punch]) -> None:
        result = filter_punches(punches, PunchQuery(since=Date(2024, 2, 5)), _TODAY)
        assert _ids(result) == [2, 3, 4]

    def test_range_is_inclusive(self, punches: list[Punch]) -> None:
        query = PunchQuery(from_date=Date(2024, 1, 10), to_date=Date(2024, 2, 5))
        assert _ids(filter_punches(punches, query, _TODAY)) == [1, 2]

    def test_last(self, punches: list[Punch]) -> None:
        result = filter_punches(punches, PunchQuery(last=Period.weeks(1)), _TODAY)
        assert _ids(result) == [3, 4]

    def test_since_match_survives_failed_range(self, punches: list[Punch]) -> None:
        query = PunchQuery(
            since=Date(2024, 3, 1),
            from_date=Date(2023, 12, 1),
            to_date=Date(2023, 12, 31),
        )
        # 3 and 4 fail the range but match since; 0 fails since but matches the range.
        assert _ids(filter_punches(punches, query, _TODAY)) == [0, 3, 4]

    def test_default_period_applies_without_bounds(self, punches: list[Punch]) -> None:
        result = filter_punches(punches, PunchQuery(), _TODAY, default_period=Period.days(14))
        assert _ids(result) == [3, 4]

    def test_default_period_ignored_with_explicit_bound(self, punches: list[Punch]) -> None:
        query = PunchQuery(since=Date(2024, 1, 1))
        result = filter_punches(punches, query, _TODAY, default_period=Period.days(1))
        assert _ids(result) == [1, 2, 3, 4]

    def test_no_bounds_at_all_keeps_everything(self, punches: list[Punch]) -> None:
        assert _ids(filter_punches(punches, PunchQuery(), _TODAY)) == [0, 1, 2, 3, 4]


class TestTagIntersection:
    def test_untagged_punches_are_excluded(self, punches: list[Punch]) -> None:
        query = PunchQuery(since=Date.min(), tag="BUG-1")
        assert _ids(filter_punches(punches, query, _TODAY)) == [0, 3]

    def test_tag_narrows_the_date_union(self, punches: list[Punch]) -> None:
        query = PunchQuery(since=Date(2024, 3, 1), tag="BUG-1")
        assert _ids(filter_punches(punches, query, _TODAY)) == [3]

    def test_tag_match_is_exact(self, punches: list[Punch]) -> None:
        query = PunchQuery(since=Date.min(), tag="bug-1")
        assert filter_punches(punches, query, _TODAY) == []

    def test_tag_does_not_widen_dates(self, punches: list[Punch]) -> None:
        query = PunchQuery(last=Period.days(3), tag="OPS")
        assert filter_punches(punches, query, _TODAY) == []


class TestResult:
    def test_input_is_not_mutated(self, punches: list[Punch]) -> None:
        before = list(punches)
        filter_punches(punches, PunchQuery(since=Date(2024, 3, 1)), _TODAY)
        assert punches == before

    def test_order_is_preserved(self, punches: list[Punch]) -> None:
        reordered = list(reversed(punches))
        result = filter_punches(reordered, PunchQuery(since=Date.min()), _TODAY)
        assert _ids(result) == [4, 3, 2, 1, 0]
