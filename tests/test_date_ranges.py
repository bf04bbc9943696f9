from datetime import date

import pytest

from budgeting.date_ranges import PRESETS, default_range, preset_range
from budgeting.domain import Transaction
from budgeting.history import group_by_day, transactions_in_month

# a Wednesday
TODAY = date(2024, 3, 13)


def test_presets():
    assert preset_range("today", TODAY) == (TODAY, TODAY)
    assert preset_range("thisWeek", TODAY) == (date(2024, 3, 10), TODAY)
    assert preset_range("thisMonth", TODAY) == (date(2024, 3, 1), TODAY)
    assert preset_range("lastMonth", TODAY) == (date(2024, 2, 1), date(2024, 2, 29))
    assert preset_range("custom", TODAY) is None


def test_this_week_on_sunday_starts_today():
    sunday = date(2024, 3, 10)
    assert preset_range("thisWeek", sunday) == (sunday, sunday)


def test_last_month_in_january():
    assert preset_range("lastMonth", date(2024, 1, 5)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_default_range_is_this_month():
    assert default_range(TODAY) == preset_range("thisMonth", TODAY)


def test_unknown_preset():
    assert "custom" in PRESETS
    with pytest.raises(KeyError):
        preset_range("yesterday", TODAY)


def make_tx(id, when):
    return Transaction(id, "expense", 1, "Makanan", "Cash", when)


def test_transactions_in_month_newest_first():
    trans = (
        make_tx("a", "2024-03-01T08:00:00"),
        make_tx("b", "2024-03-15T08:00:00"),
        make_tx("c", "2024-04-01T08:00:00"),
        make_tx("d", "2024-03-15T07:00:00"),
    )
    assert [t.id for t in transactions_in_month(trans, 2024, 2)] == ["b", "d", "a"]


def test_group_by_day():
    trans = (
        make_tx("a", "2024-03-01T08:00:00"),
        make_tx("b", "2024-03-15T08:00:00"),
        make_tx("d", "2024-03-15T07:00:00"),
    )
    groups = group_by_day(trans)
    assert [day for day, _ in groups] == [date(2024, 3, 15), date(2024, 3, 1)]
    assert [t.id for t in groups[0][1]] == ["b", "d"]
