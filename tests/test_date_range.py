"""Tests for the client-side creation date filter."""

from datetime import date, datetime, timezone

from conftest import make_character
from core.services.date_range import filter_by_date_range


def _items():
    return [
        make_character(1, created="2017-10-31T23:59:59.999Z"),
        make_character(2, created="2017-11-01T00:00:00.000Z"),
        make_character(3, created="2017-11-04T18:48:46.250Z"),
        make_character(4, created="2017-11-04T23:59:59.999Z"),
        make_character(5, created="2017-11-05T00:00:00.000Z"),
    ]


def _ids(items):
    return [item.id for item in items]


def test_no_bounds_is_identity():
    items = _items()
    assert filter_by_date_range(items, None, None) == items


def test_end_of_day_normalization_keeps_same_day_items():
    item = make_character(1, created="2017-11-04T18:48:46.250Z")
    result = filter_by_date_range([item], date(2017, 11, 1), date(2017, 11, 4))
    assert result == [item]


def test_inclusive_bounds():
    result = filter_by_date_range(_items(), date(2017, 11, 1), date(2017, 11, 4))
    assert _ids(result) == [2, 3, 4]


def test_only_start_bound():
    assert _ids(filter_by_date_range(_items(), start=date(2017, 11, 4))) == [3, 4, 5]


def test_only_end_bound():
    assert _ids(filter_by_date_range(_items(), end=date(2017, 11, 1))) == [1, 2]


def test_datetime_bounds_use_their_calendar_day():
    start = datetime(2017, 11, 4, 20, 0, tzinfo=timezone.utc)
    assert _ids(filter_by_date_range(_items(), start=start)) == [3, 4, 5]


def test_narrowing_never_grows_the_result():
    items = _items()
    wide = filter_by_date_range(items, date(2017, 10, 1), date(2017, 12, 1))
    narrower = filter_by_date_range(items, date(2017, 11, 1), date(2017, 11, 4))
    narrowest = filter_by_date_range(items, date(2017, 11, 4), date(2017, 11, 4))
    assert len(wide) >= len(narrower) >= len(narrowest)
    assert set(_ids(narrowest)) <= set(_ids(narrower)) <= set(_ids(wide))


def test_inverted_range_is_empty():
    assert filter_by_date_range(_items(), date(2017, 11, 5), date(2017, 11, 1)) == []


def test_does_not_mutate_input():
    items = _items()
    before = list(items)
    filter_by_date_range(items, date(2017, 11, 2), None)
    assert items == before
