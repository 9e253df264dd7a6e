"""Value objects shared by the scheduler, the analytics helpers and the UI.

Bills and subscriptions are validated when they are constructed, so code
that receives an :data:`Obligation` can rely on a finite, non-negative
``amount``, a real ``datetime.date`` due date and a non-empty category.
Everything produced by the scheduler is a frozen dataclass with a
``to_dict`` method that returns JSON-friendly data.
"""

from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterator, List, Tuple, Union

from .errors import InvalidInputError, InvalidPeriodError

POLICY_EARLY = 'early'
POLICY_BALANCED = 'balanced'
POLICY_LATE = 'late'
DISTRIBUTION_POLICIES = (POLICY_EARLY, POLICY_BALANCED, POLICY_LATE)

DEFAULT_CATEGORY = 'Other'
KIND_BILL = 'bill'
KIND_SUBSCRIPTION = 'subscription'

_YEAR_MONTH_PATTERN = re.compile(r'^\s*(\d{4})-(\d{1,2})\s*$')


def validate_policy(policy: str) -> str:
    normalized = (policy or '').strip().lower()
    if normalized not in DISTRIBUTION_POLICIES:
        raise InvalidInputError(
            f"Unknown distribution policy {policy!r}; expected one of {', '.join(DISTRIBUTION_POLICIES)}"
        )
    return normalized


def validate_amount(value: Any, field_name: str = 'amount') -> float:
    """Return ``value`` as a float, rejecting NaN, infinities and negatives."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(f"{field_name} must be finite, got {value!r}")
    if number < 0:
        raise InvalidInputError(f"{field_name} must not be negative, got {value!r}")
    return number


def _coerce_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidInputError(f"{field_name} must be a date, got {value!r}")


def _clean_category(value: Any) -> str:
    if value is None:
        return DEFAULT_CATEGORY
    text = str(value).strip()
    return text or DEFAULT_CATEGORY


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, e.g. ``YearMonth(2024, 2)``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise InvalidPeriodError(f"year must be an integer, got {self.year!r}")
        if isinstance(self.month, bool) or not isinstance(self.month, int):
            raise InvalidPeriodError(f"month must be an integer, got {self.month!r}")
        if not 1 <= self.year <= 9999:
            raise InvalidPeriodError(f"year {self.year} is outside 1..9999")
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"month {self.month} is outside 1..12")

    @classmethod
    def parse(cls, text: str) -> 'YearMonth':
        """Parse ``"YYYY-MM"``."""
        match = _YEAR_MONTH_PATTERN.match(text or '')
        if not match:
            raise InvalidPeriodError(f"Expected a YYYY-MM month, got {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> 'YearMonth':
        return cls(value.year, value.month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def days(self) -> Iterator[date]:
        current = self.first_day
        for _ in range(self.days_in_month):
            yield current
            current += timedelta(days=1)

    def contains(self, value: date) -> bool:
        return self.first_day <= value <= self.last_day

    def clamp_day(self, day: int) -> date:
        """Date for ``day`` in this month, clamped to the last valid day."""
        return date(self.year, self.month, max(1, min(day, self.days_in_month)))

    def shift(self, months: int) -> 'YearMonth':
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(index // 12, index % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class Category:
    name: str
    color: str


@dataclass(frozen=True)
class Bill:
    id: str
    name: str
    amount: float
    due_date: date
    category: str = DEFAULT_CATEGORY
    recurring: bool = False
    frequency: str = 'monthly'
    auto_pay: bool = False
    status: str = 'pending'
    is_paid: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'amount', validate_amount(self.amount))
        object.__setattr__(self, 'due_date', _coerce_date(self.due_date, 'due_date'))
        object.__setattr__(self, 'category', _clean_category(self.category))

    @property
    def kind(self) -> str:
        return KIND_BILL

    @property
    def paid(self) -> bool:
        return self.is_paid or self.status == 'paid'


@dataclass(frozen=True)
class Subscription:
    id: str
    name: str
    amount: float
    due_date: date
    category: str = DEFAULT_CATEGORY
    provider: str = ''
    billing_cycle: str = 'monthly'
    usage: float = 50.0
    value: float = 50.0
    status: str = 'active'

    def __post_init__(self) -> None:
        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'amount', validate_amount(self.amount))
        object.__setattr__(self, 'due_date', _coerce_date(self.due_date, 'next_billing_date'))
        object.__setattr__(self, 'category', _clean_category(self.category))
        object.__setattr__(self, 'usage', validate_amount(self.usage, 'usage'))
        object.__setattr__(self, 'value', validate_amount(self.value, 'value'))

    @property
    def kind(self) -> str:
        return KIND_SUBSCRIPTION

    @property
    def recurring(self) -> bool:
        return True

    @property
    def cost(self) -> float:
        return self.amount

    @property
    def next_billing_date(self) -> date:
        return self.due_date

    @property
    def paid(self) -> bool:
        return False


Obligation = Union[Bill, Subscription]


@dataclass(frozen=True)
class ObligationRef:
    id: str
    name: str
    amount: float
    kind: str
    category: str

    @classmethod
    def from_obligation(cls, obligation: Obligation) -> 'ObligationRef':
        return cls(
            id=obligation.id,
            name=obligation.name,
            amount=obligation.amount,
            kind=obligation.kind,
            category=obligation.category,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'kind': self.kind,
            'category': self.category,
        }


@dataclass(frozen=True)
class PaymentSchedule:
    date: date
    total_amount: float
    items: Tuple[ObligationRef, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'total_amount': self.total_amount,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class CashFlowProjection:
    date: date
    income_for_day: float
    expense_for_day: float
    running_balance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'income_for_day': self.income_for_day,
            'expense_for_day': self.expense_for_day,
            'running_balance': self.running_balance,
        }


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {'category': self.category, 'amount': self.amount, 'color': self.color}


def to_dicts(values) -> List[Dict[str, Any]]:
    return [value.to_dict() for value in values]
