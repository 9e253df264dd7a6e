"""Tests for rolling scheduled payments up by expense category."""

from __future__ import annotations

from datetime import date

import pytest

from bills_dashboard.categories import (
    EXPENSE_CATEGORIES,
    OTHER_COLOR,
    aggregate_categories,
    category_color,
)
from bills_dashboard.models import Bill, Category, Subscription, YearMonth
from bills_dashboard.schedule import build_schedule, schedule_total

MARCH = YearMonth(2024, 3)


def _schedule(obligations, policy: str = 'balanced'):
    return build_schedule(obligations, MARCH, policy)


def test_totals_follow_the_reference_order() -> None:
    schedule = _schedule([
        Bill('a', 'Electric', 100.0, date(2024, 3, 10), 'Utilities'),
        Bill('b', 'Rent', 50.0, date(2024, 3, 10), 'Housing'),
        Subscription('c', 'Netflix', 30.0, date(2024, 3, 22), 'Entertainment'),
    ])

    totals = aggregate_categories(schedule)

    assert [(t.category, t.amount) for t in totals] == [
        ('Housing', 50.0),
        ('Utilities', 100.0),
        ('Entertainment', 30.0),
    ]
    assert totals[0].color == '#8884d8'


def test_unknown_categories_fall_into_other() -> None:
    schedule = _schedule([
        Bill('a', 'Gift', 40.0, date(2024, 3, 3), 'Gifts'),
        Bill('b', 'Misc', 10.0, date(2024, 3, 4)),
    ])

    totals = aggregate_categories(schedule)

    assert [(t.category, t.amount, t.color) for t in totals] == [('Other', 50.0, OTHER_COLOR)]


def test_matching_ignores_case() -> None:
    schedule = _schedule([
        Bill('a', 'Water', 20.0, date(2024, 3, 3), 'utilities'),
        Bill('b', 'Power', 80.0, date(2024, 3, 9), 'UTILITIES'),
    ])

    totals = aggregate_categories(schedule)

    assert [(t.category, t.amount) for t in totals] == [('Utilities', 100.0)]


@pytest.mark.parametrize('policy', ['early', 'balanced', 'late'])
def test_category_totals_add_up_to_the_schedule_total(policy: str) -> None:
    obligations = [
        Bill('a', 'Electric', 142.35, date(2024, 3, 10), 'Utilities'),
        Bill('b', 'Rent', 1850.0, date(2024, 3, 1), 'Housing'),
        Bill('c', 'Gift', 25.5, date(2024, 3, 18), 'Gifts'),
        Subscription('d', 'Hulu', 17.99, date(2024, 3, 20), 'Entertainment'),
    ]
    schedule = _schedule(obligations, policy)

    totals = aggregate_categories(schedule)

    assert sum(t.amount for t in totals) == pytest.approx(schedule_total(schedule))


def test_zero_totals_are_left_out() -> None:
    schedule = _schedule([
        Bill('a', 'Free trial', 0.0, date(2024, 3, 3), 'Entertainment'),
        Bill('b', 'Rent', 900.0, date(2024, 3, 1), 'Housing'),
    ])

    assert [t.category for t in aggregate_categories(schedule)] == ['Housing']
    assert aggregate_categories([]) == []


def test_custom_category_list_gets_an_other_bucket() -> None:
    known = [Category('Rent', '#111111')]
    schedule = _schedule([
        Bill('a', 'Rent', 900.0, date(2024, 3, 1), 'rent'),
        Bill('b', 'Phone', 60.0, date(2024, 3, 8), 'Utilities'),
    ])

    totals = aggregate_categories(schedule, known)

    assert [(t.category, t.amount, t.color) for t in totals] == [
        ('Rent', 900.0, '#111111'),
        ('Other', 60.0, OTHER_COLOR),
    ]


def test_category_color_lookup() -> None:
    assert category_color('healthcare') == '#00c49f'
    assert category_color('Nope') == OTHER_COLOR
    assert len({c.name for c in EXPENSE_CATEGORIES}) == len(EXPENSE_CATEGORIES)


def test_repeated_category_names_are_counted_once() -> None:
    known = [Category('Other', '#000000'), Category('other', '#111111'), Category('Rent', '#222222')]
    schedule = _schedule([
        Bill('a', 'Rent', 150.0, date(2024, 3, 10), 'Rent'),
        Bill('b', 'Gift', 30.0, date(2024, 3, 22), 'Gifts'),
    ])

    totals = aggregate_categories(schedule, known)

    assert [(t.category, t.amount, t.color) for t in totals] == [
        ('Other', 30.0, '#000000'),
        ('Rent', 150.0, '#222222'),
    ]
    assert sum(t.amount for t in totals) == pytest.approx(schedule_total(schedule))
