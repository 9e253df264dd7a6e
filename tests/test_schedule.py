"""Tests for bucketing obligations into a month's payment schedule."""

from __future__ import annotations

from datetime import date

import pytest

from bills_dashboard.errors import InvalidInputError
from bills_dashboard.models import Bill, Subscription, YearMonth
from bills_dashboard.schedule import build_schedule, effective_date, schedule_total

MARCH = YearMonth(2024, 3)


def _march_bills():
    return [
        Bill('a', 'A', 100.0, date(2024, 3, 10), 'Utilities', recurring=True),
        Bill('b', 'B', 50.0, date(2024, 3, 10), 'Housing', recurring=True),
        Bill('c', 'C', 30.0, date(2024, 3, 22), 'Entertainment', recurring=True),
    ]


def test_balanced_groups_by_original_due_date() -> None:
    schedule = build_schedule(_march_bills(), MARCH, 'balanced')

    assert [entry.date for entry in schedule] == [date(2024, 3, 10), date(2024, 3, 22)]
    assert [entry.total_amount for entry in schedule] == [150.0, 30.0]
    assert [item.id for item in schedule[0].items] == ['a', 'b']
    assert [item.id for item in schedule[1].items] == ['c']


def test_early_collapses_everything_onto_the_fifth() -> None:
    schedule = build_schedule(_march_bills(), MARCH, 'early')

    assert len(schedule) == 1
    assert schedule[0].date == date(2024, 3, 5)
    assert schedule[0].total_amount == 180.0
    assert [item.name for item in schedule[0].items] == ['A', 'B', 'C']


def test_late_collapses_everything_onto_the_twenty_fifth() -> None:
    schedule = build_schedule(_march_bills(), MARCH, 'late')

    assert [(entry.date, entry.total_amount) for entry in schedule] == [(date(2024, 3, 25), 180.0)]


def test_policy_is_case_insensitive() -> None:
    assert build_schedule(_march_bills(), MARCH, 'EARLY') == build_schedule(_march_bills(), MARCH, 'early')


def test_unknown_policy_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        build_schedule(_march_bills(), MARCH, 'whenever')


def test_obligations_outside_the_month_are_ignored() -> None:
    obligations = _march_bills() + [
        Bill('d', 'Next month', 999.0, date(2024, 4, 1), recurring=True),
        Bill('e', 'Last month', 999.0, date(2024, 2, 29), recurring=True),
    ]

    for policy in ('early', 'balanced', 'late'):
        schedule = build_schedule(obligations, MARCH, policy)
        assert schedule_total(schedule) == 180.0
        assert all(MARCH.contains(entry.date) for entry in schedule)


def test_empty_input_gives_empty_schedule() -> None:
    assert build_schedule([], MARCH, 'balanced') == []
    assert build_schedule(_march_bills(), YearMonth(2024, 5), 'early') == []


def test_bills_and_subscriptions_share_a_bucket() -> None:
    obligations = [
        Bill('rent', 'Rent', 1850.0, date(2024, 3, 1), 'Housing', recurring=True),
        Subscription('netflix', 'Netflix', 15.49, date(2024, 3, 1), 'Entertainment'),
    ]

    schedule = build_schedule(obligations, MARCH)

    assert len(schedule) == 1
    assert schedule[0].total_amount == pytest.approx(1865.49)
    assert [item.kind for item in schedule[0].items] == ['bill', 'subscription']


def test_schedule_is_sorted_and_dates_are_unique() -> None:
    obligations = [
        Bill('z', 'Z', 10.0, date(2024, 3, 30)),
        Bill('y', 'Y', 20.0, date(2024, 3, 2)),
        Bill('x', 'X', 30.0, date(2024, 3, 15)),
        Bill('w', 'W', 40.0, date(2024, 3, 2)),
    ]

    schedule = build_schedule(obligations, MARCH)
    dates = [entry.date for entry in schedule]

    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)
    for entry in schedule:
        assert entry.total_amount == pytest.approx(sum(item.amount for item in entry.items))


def test_rebuilding_gives_the_same_schedule() -> None:
    first = build_schedule(_march_bills(), MARCH, 'late')
    second = build_schedule(_march_bills(), MARCH, 'late')
    assert first == second


def test_effective_date_keeps_balanced_dates() -> None:
    due = date(2024, 2, 29)
    assert effective_date(due, YearMonth(2024, 2), 'balanced') == due
    assert effective_date(due, YearMonth(2024, 2), 'early') == date(2024, 2, 5)
    assert effective_date(due, YearMonth(2024, 2), 'late') == date(2024, 2, 25)
