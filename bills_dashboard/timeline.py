"""Bills summary, month-grouped payment timeline and calendar grid."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from .models import Obligation, YearMonth

STATUS_PAID = 'paid'
STATUS_OVERDUE = 'overdue'
STATUS_UPCOMING = 'upcoming'
DUE_SOON_DAYS = 7
CALENDAR_CELLS = 42


def payment_status(obligation: Obligation, today: date) -> str:
    if obligation.paid:
        return STATUS_PAID
    if obligation.due_date < today:
        return STATUS_OVERDUE
    return STATUS_UPCOMING


def bills_summary(bills: Iterable[Obligation], today: date) -> Dict[str, float]:
    """Split unpaid amounts into overdue, due within a week and later.

    Paid bills are ignored. Amounts are rounded to cents.
    """
    total_due = overdue = due_soon = upcoming = 0.0
    unpaid_count = 0
    for bill in bills:
        if bill.paid:
            continue
        unpaid_count += 1
        days_until = (bill.due_date - today).days
        total_due += bill.amount
        if days_until < 0:
            overdue += bill.amount
        elif days_until <= DUE_SOON_DAYS:
            due_soon += bill.amount
        else:
            upcoming += bill.amount
    return {
        'total_due': round(total_due, 2),
        'overdue': round(overdue, 2),
        'due_soon': round(due_soon, 2),
        'upcoming': round(upcoming, 2),
        'unpaid_count': unpaid_count,
    }


@dataclass
class MonthGroup:
    month: YearMonth
    payments: List[Obligation] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def label(self) -> str:
        return self.month.label


def group_payments_by_month(
    obligations: Iterable[Obligation],
    today: date,
    status: Optional[str] = None,
) -> Dict[str, MonthGroup]:
    """Group obligations by due month (chronological), optionally keeping one status."""
    selected = [
        item for item in obligations
        if status in (None, 'all') or payment_status(item, today) == status
    ]
    groups: Dict[str, MonthGroup] = OrderedDict()
    for item in sorted(selected, key=lambda o: o.due_date):
        month = YearMonth.from_date(item.due_date)
        group = groups.setdefault(month.label, MonthGroup(month))
        group.payments.append(item)
    return groups


@dataclass
class CalendarDay:
    date: date
    in_month: bool
    items: List[Obligation] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.amount for item in self.items)


def calendar_grid(obligations: Iterable[Obligation], month: YearMonth) -> List[CalendarDay]:
    """Six Sunday-first weeks covering ``month`` with each day's obligations."""
    by_day: Dict[date, List[Obligation]] = {}
    for item in obligations:
        by_day.setdefault(item.due_date, []).append(item)

    first = month.first_day
    # date.weekday(): Monday == 0, so Sunday-first offset is (weekday + 1) % 7
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    days = []
    for offset in range(CALENDAR_CELLS):
        day = start + timedelta(days=offset)
        days.append(CalendarDay(date=day, in_month=month.contains(day), items=by_day.get(day, [])))
    return days
