"""Day-by-day cash-flow projection for a month's payment schedule.

The projection is relative: the running balance starts at zero on the day
before the first of the month, so it shows how the month's income and
payments move money rather than an absolute account balance.

Income follows a fixed pay-day model (by default two equal disbursements on
the 1st and 15th). Scheduled payments land on their schedule date. Days
without a scheduled payment carry a synthetic share of the month's
scheduled total, placed according to the policy window, so the chosen
strategy shapes the whole month. Extra spend that is not tied to any bill or
subscription (``unscheduled_expenses``) is spread over the same window.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

from .models import (
    POLICY_EARLY,
    POLICY_LATE,
    CashFlowProjection,
    PaymentSchedule,
    YearMonth,
    validate_amount,
    validate_policy,
)
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_INCOME_DAYS: Tuple[int, ...] = (1, 15)
# Number of days at the start (early) or end (late) of the month that
# absorb synthetic spending
POLICY_WINDOW_DAYS = 10
# Highest day number that exists in every month
MAX_INCOME_DAY = 28


def _validate_income_days(income_days: Sequence[int]) -> Tuple[int, ...]:
    days = tuple(income_days)
    if not days:
        raise InvalidInputError("At least one income day is required")
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= MAX_INCOME_DAY:
            raise InvalidInputError(f"Income days must be integers in 1..{MAX_INCOME_DAY}, got {day!r}")
    if len(set(days)) != len(days):
        raise InvalidInputError(f"Income days must be distinct, got {days!r}")
    return days


def policy_window(month: YearMonth, policy: str) -> List[date]:
    """Days of ``month`` that absorb synthetic spending under ``policy``."""
    days = list(month.days())
    if policy == POLICY_EARLY:
        return days[:POLICY_WINDOW_DAYS]
    if policy == POLICY_LATE:
        return days[-POLICY_WINDOW_DAYS:]
    return days


def _fallback_expenses(
    month: YearMonth,
    policy: str,
    scheduled_days: Iterable[date],
    scheduled_total: float,
) -> Dict[date, float]:
    """Per-day share of the scheduled total for window days with no payment.

    Every window day is worth ``scheduled_total / len(window)``; days that
    carry a scheduled payment keep that payment instead of the share.
    """
    if scheduled_total == 0:
        return {}
    scheduled = set(scheduled_days)
    window = policy_window(month, policy)
    share = scheduled_total / len(window)
    return {day: share for day in window if day not in scheduled}


def _unscheduled_spread(
    month: YearMonth,
    policy: str,
    scheduled_days: Iterable[date],
    unscheduled_expenses: float,
) -> Dict[date, float]:
    if unscheduled_expenses == 0:
        return {}
    scheduled = set(scheduled_days)
    window = policy_window(month, policy)
    eligible = [day for day in window if day not in scheduled]
    if not eligible:
        eligible = [day for day in month.days() if day not in scheduled]
    if not eligible:
        # Every day already has a payment; stack on top of the window.
        eligible = window
    share = unscheduled_expenses / len(eligible)
    return {day: share for day in eligible}


def project_cash_flow(
    schedule: Iterable[PaymentSchedule],
    month: YearMonth,
    monthly_income: float,
    policy: str = 'balanced',
    *,
    income_days: Sequence[int] = DEFAULT_INCOME_DAYS,
    unscheduled_expenses: float = 0.0,
) -> List[CashFlowProjection]:
    """Simulate the running balance across every calendar day of ``month``.

    A day with a schedule entry spends exactly that entry's total. Every
    other day inside the policy window (first 10 days for ``early``, last
    10 for ``late``, the whole month for ``balanced``) spends
    ``scheduled_total / window_length``. The month's expenses therefore
    add up to::

        scheduled_total
        + scheduled_total * unscheduled_window_days / window_length
        + unscheduled_expenses

    Parameters
    ----------
    schedule : iterable of PaymentSchedule
        Output of :func:`bills_dashboard.schedule.build_schedule`. Entries
        outside ``month`` are ignored.
    month : YearMonth
        Month to project.
    monthly_income : float
        Income for the month, split evenly across ``income_days``.
    policy : str
        ``"early"``, ``"balanced"`` or ``"late"``; decides which days carry
        the synthetic spending.
    income_days : sequence of int, optional
        Pay days within the month (1..28).
    unscheduled_expenses : float, optional
        Expected spend not tied to a scheduled payment, spread evenly over
        the window days without a payment and fully conserved.

    Returns
    -------
    list of CashFlowProjection
        One entry per day, ascending, with
        ``running_balance[i] == running_balance[i-1] + income - expense``.
    """
    monthly_income = validate_amount(monthly_income, 'monthly_income')
    unscheduled_expenses = validate_amount(unscheduled_expenses, 'unscheduled_expenses')
    policy = validate_policy(policy)
    pay_days = set(_validate_income_days(income_days))
    income_per_payday = monthly_income / len(pay_days)

    scheduled: Dict[date, float] = {}
    for entry in schedule:
        if month.contains(entry.date):
            scheduled[entry.date] = scheduled.get(entry.date, 0.0) + entry.total_amount
    scheduled_total = sum(scheduled.values())

    fallback = _fallback_expenses(month, policy, scheduled.keys(), scheduled_total)
    extra = _unscheduled_spread(month, policy, scheduled.keys(), unscheduled_expenses)

    projection: List[CashFlowProjection] = []
    balance = 0.0
    for day in month.days():
        income = income_per_payday if day.day in pay_days else 0.0
        if day in scheduled:
            expense = scheduled[day]
        else:
            expense = fallback.get(day, 0.0)
        # extra only names scheduled days when the whole month is booked
        expense += extra.get(day, 0.0)
        balance = balance + income - expense
        projection.append(CashFlowProjection(
            date=day,
            income_for_day=income,
            expense_for_day=expense,
            running_balance=balance,
        ))

    logger.debug(
        "Projected %s under %s policy: income=%.2f scheduled=%.2f unscheduled=%.2f closing=%.2f",
        month, policy, monthly_income, scheduled_total, unscheduled_expenses, balance,
    )
    return projection


def lowest_balance(projection: Sequence[CashFlowProjection]) -> float:
    """Lowest running balance in the projection, or 0.0 for an empty one."""
    if not projection:
        return 0.0
    return min(entry.running_balance for entry in projection)
