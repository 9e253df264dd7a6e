"""Tests for the validated value objects."""

from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from bills_dashboard.errors import InvalidInputError, InvalidPeriodError
from bills_dashboard.models import (
    Bill,
    CashFlowProjection,
    ObligationRef,
    PaymentSchedule,
    Subscription,
    YearMonth,
    validate_policy,
)


def test_year_month_basics() -> None:
    feb = YearMonth(2024, 2)

    assert feb.days_in_month == 29
    assert YearMonth(2023, 2).days_in_month == 28
    assert feb.first_day == date(2024, 2, 1)
    assert feb.last_day == date(2024, 2, 29)
    assert feb.label == 'February 2024'
    assert str(feb) == '2024-02'
    assert len(list(feb.days())) == 29
    assert feb.contains(date(2024, 2, 29))
    assert not feb.contains(date(2024, 3, 1))


@pytest.mark.parametrize('year, month', [(2024, 0), (2024, 13), (0, 1), (2024.0, 1), (2024, '3'), (True, 1)])
def test_year_month_rejects_bad_values(year, month) -> None:
    with pytest.raises(InvalidPeriodError):
        YearMonth(year, month)


def test_year_month_parse() -> None:
    assert YearMonth.parse('2024-03') == YearMonth(2024, 3)
    assert YearMonth.parse(' 2024-3 ') == YearMonth(2024, 3)
    for bad in ('March 2024', '2024/03', '2024-13', ''):
        with pytest.raises(InvalidPeriodError):
            YearMonth.parse(bad)


def test_year_month_shift_and_clamp() -> None:
    feb = YearMonth(2024, 2)

    assert feb.shift(-3) == YearMonth(2023, 11)
    assert feb.shift(11) == YearMonth(2025, 1)
    assert feb.shift(0) == feb
    assert feb.clamp_day(31) == date(2024, 2, 29)
    assert feb.clamp_day(5) == date(2024, 2, 5)
    assert YearMonth(2023, 12) < YearMonth(2024, 1)


@pytest.mark.parametrize('amount', [math.nan, math.inf, -0.01, None, '12', False])
def test_bill_amount_must_be_a_finite_non_negative_number(amount) -> None:
    with pytest.raises(InvalidInputError):
        Bill('x', 'X', amount, date(2024, 3, 1))


def test_bill_normalizes_fields() -> None:
    bill = Bill(7, 'Rent', 1850, datetime(2024, 3, 1, 9, 30), category='  ')

    assert bill.id == '7'
    assert bill.amount == 1850.0
    assert bill.due_date == date(2024, 3, 1)
    assert bill.category == 'Other'
    assert bill.kind == 'bill'
    assert not bill.paid
    assert Bill('y', 'Y', 1.0, date(2024, 3, 1), status='paid').paid


def test_bill_rejects_text_due_dates() -> None:
    with pytest.raises(InvalidInputError):
        Bill('x', 'X', 10.0, '2024-03-01')


def test_subscription_properties() -> None:
    sub = Subscription('s', 'Spotify', 10.99, date(2024, 3, 4), 'Entertainment', usage=70)

    assert sub.kind == 'subscription'
    assert sub.recurring
    assert sub.cost == 10.99
    assert sub.next_billing_date == date(2024, 3, 4)
    assert sub.usage == 70.0
    with pytest.raises(InvalidInputError):
        Subscription('s', 'Spotify', 10.99, date(2024, 3, 4), value=math.nan)


def test_validate_policy() -> None:
    assert validate_policy(' Early ') == 'early'
    with pytest.raises(InvalidInputError):
        validate_policy('')


def test_to_dict_uses_iso_dates() -> None:
    ref = ObligationRef('a', 'A', 10.0, 'bill', 'Housing')
    entry = PaymentSchedule(date(2024, 3, 10), 10.0, (ref,))

    assert entry.to_dict() == {
        'date': '2024-03-10',
        'total_amount': 10.0,
        'items': [{'id': 'a', 'name': 'A', 'amount': 10.0, 'kind': 'bill', 'category': 'Housing'}],
    }
    assert CashFlowProjection(date(2024, 3, 1), 5.0, 1.0, 4.0).to_dict()['date'] == '2024-03-01'
