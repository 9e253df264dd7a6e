"""Smart payment scheduler: schedule, cash-flow projection and category split.

``SmartPaymentScheduler`` loads a user's recurring bills and active
subscriptions through an injected repository and runs the three pure
steps over them:

* :func:`bills_dashboard.schedule.build_schedule`
* :func:`bills_dashboard.cash_flow.project_cash_flow`
* :func:`bills_dashboard.categories.aggregate_categories`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .cash_flow import DEFAULT_INCOME_DAYS, lowest_balance, project_cash_flow
from .categories import EXPENSE_CATEGORIES, aggregate_categories
from .models import (
    CashFlowProjection,
    Category,
    CategoryTotal,
    Obligation,
    PaymentSchedule,
    YearMonth,
    to_dicts,
    validate_policy,
)
from .schedule import build_schedule, schedule_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulePlan:
    month: YearMonth
    policy: str
    monthly_income: float
    schedule: List[PaymentSchedule] = field(default_factory=list)
    projection: List[CashFlowProjection] = field(default_factory=list)
    categories: List[CategoryTotal] = field(default_factory=list)

    @property
    def total_scheduled(self) -> float:
        return schedule_total(self.schedule)

    @property
    def lowest_balance(self) -> float:
        return lowest_balance(self.projection)

    @property
    def closing_balance(self) -> float:
        return self.projection[-1].running_balance if self.projection else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'month': str(self.month),
            'policy': self.policy,
            'monthly_income': self.monthly_income,
            'total_scheduled': self.total_scheduled,
            'lowest_balance': self.lowest_balance,
            'schedule': to_dicts(self.schedule),
            'projection': to_dicts(self.projection),
            'categories': to_dicts(self.categories),
        }


class SmartPaymentScheduler:
    """Build payment plans for a user from an injected data source.

    ``repository`` only needs ``list_bills(user_id, recurring_only=...)`` and
    ``list_subscriptions(user_id)``; tests pass a fake.
    """

    def __init__(self, repository: Any, categories: Sequence[Category] = EXPENSE_CATEGORIES):
        self.repository = repository
        self.categories = list(categories)

    def load_obligations(self, user_id: str) -> List[Obligation]:
        try:
            bills = self.repository.list_bills(user_id, recurring_only=True)
            subscriptions = self.repository.list_subscriptions(user_id)
        except Exception:
            logger.exception("Failed to load bills and subscriptions for user %s", user_id)
            raise
        logger.info(
            "Loaded %d recurring bills and %d subscriptions for user %s",
            len(bills), len(subscriptions), user_id,
        )
        return [*bills, *subscriptions]

    def plan(
        self,
        obligations: Sequence[Obligation],
        month: YearMonth,
        monthly_income: float,
        policy: str = 'balanced',
        *,
        income_days: Sequence[int] = DEFAULT_INCOME_DAYS,
        unscheduled_expenses: float = 0.0,
    ) -> SchedulePlan:
        policy = validate_policy(policy)
        schedule = build_schedule(obligations, month, policy)
        projection = project_cash_flow(
            schedule,
            month,
            monthly_income,
            policy,
            income_days=income_days,
            unscheduled_expenses=unscheduled_expenses,
        )
        categories = aggregate_categories(schedule, self.categories)
        return SchedulePlan(
            month=month,
            policy=policy,
            monthly_income=float(monthly_income),
            schedule=schedule,
            projection=projection,
            categories=categories,
        )

    def plan_for_user(
        self,
        user_id: str,
        month: YearMonth,
        monthly_income: float,
        policy: str = 'balanced',
        **projection_options: Any,
    ) -> SchedulePlan:
        obligations = self.load_obligations(user_id)
        return self.plan(obligations, month, monthly_income, policy, **projection_options)
