"""Tests for the bills summary, month grouping and calendar grid."""

from __future__ import annotations

from datetime import date

from bills_dashboard.models import Bill, Subscription, YearMonth
from bills_dashboard.timeline import (
    bills_summary,
    calendar_grid,
    group_payments_by_month,
    payment_status,
)

TODAY = date(2024, 3, 10)


def test_payment_status() -> None:
    assert payment_status(Bill('a', 'A', 1.0, date(2024, 3, 1)), TODAY) == 'overdue'
    assert payment_status(Bill('b', 'B', 1.0, TODAY), TODAY) == 'upcoming'
    assert payment_status(Bill('c', 'C', 1.0, date(2024, 3, 1), is_paid=True), TODAY) == 'paid'


def test_bills_summary_buckets() -> None:
    bills = [
        Bill('overdue', 'O', 100.0, date(2024, 3, 1)),
        Bill('soon', 'S', 50.0, date(2024, 3, 15)),
        Bill('week', 'W', 20.0, date(2024, 3, 17)),
        Bill('later', 'L', 30.0, date(2024, 3, 18)),
        Bill('paid', 'P', 999.0, date(2024, 3, 2), status='paid'),
    ]

    assert bills_summary(bills, TODAY) == {
        'total_due': 200.0,
        'overdue': 100.0,
        'due_soon': 70.0,
        'upcoming': 30.0,
        'unpaid_count': 4,
    }


def test_group_payments_by_month_is_chronological() -> None:
    items = [
        Subscription('s', 'Spotify', 10.0, date(2024, 4, 2)),
        Bill('b', 'Rent', 900.0, date(2024, 3, 28)),
        Bill('c', 'Phone', 60.0, date(2024, 4, 20)),
        Bill('old', 'Old', 5.0, date(2024, 2, 1)),
    ]

    groups = group_payments_by_month(items, TODAY, 'upcoming')

    assert list(groups) == ['March 2024', 'April 2024']
    assert groups['April 2024'].total == 70.0
    assert [p.id for p in groups['April 2024'].payments] == ['s', 'c']
    assert list(group_payments_by_month(items, TODAY, 'overdue')) == ['February 2024']
    assert len(group_payments_by_month(items, TODAY)) == 3


def test_calendar_grid_starts_on_sunday() -> None:
    bill = Bill('rent', 'Rent', 900.0, date(2024, 3, 1))

    grid = calendar_grid([bill], YearMonth(2024, 3))

    assert len(grid) == 42
    assert grid[0].date == date(2024, 2, 25)
    assert not grid[0].in_month
    assert grid[5].date == date(2024, 3, 1)
    assert grid[5].items == [bill]
    assert grid[5].total == 900.0
    assert sum(day.in_month for day in grid) == 31


def test_calendar_grid_for_month_starting_on_sunday() -> None:
    grid = calendar_grid([], YearMonth(2024, 9))

    assert grid[0].date == date(2024, 9, 1)
    assert grid[0].in_month
