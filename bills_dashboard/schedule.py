"""Bucket recurring bills and subscriptions into a month's payment schedule."""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List

from .models import (
    POLICY_EARLY,
    POLICY_LATE,
    Obligation,
    ObligationRef,
    PaymentSchedule,
    YearMonth,
    validate_policy,
)

logger = logging.getLogger(__name__)

# Day of month every payment moves to under the early/late policies
EARLY_PAYMENT_DAY = 5
LATE_PAYMENT_DAY = 25


def effective_date(due_date: date, month: YearMonth, policy: str) -> date:
    """Date a payment lands on once ``policy`` is applied.

    Targets that do not exist in ``month`` are clamped to its last day
    rather than rolling over into the next month.
    """
    if policy == POLICY_EARLY:
        return month.clamp_day(EARLY_PAYMENT_DAY)
    if policy == POLICY_LATE:
        return month.clamp_day(LATE_PAYMENT_DAY)
    return due_date


def obligations_in_month(obligations: Iterable[Obligation], month: YearMonth) -> List[Obligation]:
    return [item for item in obligations if month.contains(item.due_date)]


def build_schedule(
    obligations: Iterable[Obligation],
    month: YearMonth,
    policy: str = 'balanced',
) -> List[PaymentSchedule]:
    """Group the obligations due in ``month`` by their effective payment date.

    Returns one :class:`PaymentSchedule` per distinct date, sorted ascending.
    Items keep the order in which they were supplied. An empty list is
    returned when nothing falls inside the month.
    """
    policy = validate_policy(policy)
    in_month = obligations_in_month(obligations, month)

    buckets: Dict[date, List[ObligationRef]] = OrderedDict()
    for obligation in in_month:
        key = effective_date(obligation.due_date, month, policy)
        buckets.setdefault(key, []).append(ObligationRef.from_obligation(obligation))

    schedule = [
        PaymentSchedule(
            date=day,
            total_amount=sum(ref.amount for ref in refs),
            items=tuple(refs),
        )
        for day, refs in sorted(buckets.items(), key=lambda pair: pair[0])
    ]
    logger.debug(
        "Built %d schedule entries for %s (%s) from %d obligations",
        len(schedule), month, policy, len(in_month),
    )
    return schedule


def schedule_total(schedule: Iterable[PaymentSchedule]) -> float:
    return sum(entry.total_amount for entry in schedule)
