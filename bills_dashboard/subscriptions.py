"""Subscription analytics: monthly cost, ROI scoring, duplicates and price alerts."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import Obligation, Subscription

logger = logging.getLogger(__name__)

# Multiplier that turns one charge into an average monthly cost
BILLING_CYCLE_MULTIPLIERS: Dict[str, float] = {
    'weekly': 4.33,
    'biweekly': 2.17,
    'bi-weekly': 2.17,
    'monthly': 1.0,
    'quarterly': 1 / 3,
    'semi-annually': 1 / 6,
    'semiannually': 1 / 6,
    'bi-annual': 1 / 6,
    'annually': 1 / 12,
    'annual': 1 / 12,
    'yearly': 1 / 12,
}

STREAMING_CATEGORY_HINTS = ('streaming', 'entertainment')
OVERLAP_GROUP_SIZE = 3


def monthly_cost(amount: float, billing_cycle: Optional[str]) -> float:
    """Average monthly cost of a charge billed every ``billing_cycle``.

    Unknown cycles are treated as monthly.
    """
    cycle = (billing_cycle or 'monthly').strip().lower()
    multiplier = BILLING_CYCLE_MULTIPLIERS.get(cycle)
    if multiplier is None:
        logger.debug("Unknown billing cycle %r, treating as monthly", billing_cycle)
        multiplier = 1.0
    return amount * multiplier


@dataclass(frozen=True)
class RoiAnalysis:
    subscription: Subscription
    monthly_cost: float
    cost_per_use: float
    value_score: int
    roi_percentage: int
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.subscription.id,
            'name': self.subscription.name,
            'category': self.subscription.category,
            'billing_cycle': self.subscription.billing_cycle,
            'monthly_cost': self.monthly_cost,
            'cost_per_use': self.cost_per_use,
            'value_score': self.value_score,
            'roi_percentage': self.roi_percentage,
            'recommendation': self.recommendation,
        }


def _recommendation(subscription: Subscription, roi_percentage: int) -> str:
    usage, value, cost = subscription.usage, subscription.value, subscription.cost
    if usage < 30 and cost > 10:
        return "Consider cancelling or downgrading this subscription due to low usage."
    if usage < 50 and cost > 20:
        return "Evaluate if this subscription is still necessary or if a lower tier would suffice."
    if value > 80 and cost > 20:
        return "This is a high-value subscription. Consider annual plans for potential savings."
    if roi_percentage < 50:
        return "The return on investment is low. Consider alternatives or optimizing usage."
    return "This subscription provides good value for your usage."


def analyze_roi(subscription: Subscription) -> RoiAnalysis:
    """Score one subscription.

    ``usage`` and ``value`` are 0-100 self-assessed scores. Cost per use
    scales the monthly cost by how much of the optimal usage is achieved,
    and ROI is value relative to usage.
    """
    cost = monthly_cost(subscription.cost, subscription.billing_cycle)
    usage = subscription.usage
    cost_per_use = cost / (usage / 100) if usage > 0 else cost
    value_score = int(round(subscription.value))
    roi_percentage = int(round(subscription.value / usage * 100)) if usage > 0 else 0
    return RoiAnalysis(
        subscription=subscription,
        monthly_cost=cost,
        cost_per_use=cost_per_use,
        value_score=value_score,
        roi_percentage=roi_percentage,
        recommendation=_recommendation(subscription, roi_percentage),
    )


def roi_summary(subscriptions: Sequence[Subscription]) -> Dict[str, Any]:
    """Analyse every subscription and return totals plus analyses sorted by ROI (lowest first)."""
    analyses = [analyze_roi(sub) for sub in subscriptions]
    total = sum(a.monthly_cost for a in analyses)
    average_value = sum(a.value_score for a in analyses) / len(analyses) if analyses else 0.0
    return {
        'total_monthly_cost': total,
        'average_value_score': average_value,
        'analyses': sorted(analyses, key=lambda a: (a.roi_percentage, -a.monthly_cost)),
    }


def monthly_cost_by_category(subscriptions: Iterable[Subscription]) -> Dict[str, float]:
    totals: Dict[str, float] = OrderedDict()
    for sub in subscriptions:
        totals[sub.category] = totals.get(sub.category, 0.0) + monthly_cost(sub.cost, sub.billing_cycle)
    return dict(totals)


@dataclass(frozen=True)
class DuplicateGroup:
    category: str
    subscriptions: List[Subscription]
    reason: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'subscriptions': [sub.name for sub in self.subscriptions],
            'reason': self.reason,
            'recommendation': self.recommendation,
        }


def _provider_key(subscription: Subscription) -> str:
    return (subscription.provider or '').strip().lower()


def find_duplicate_services(subscriptions: Iterable[Subscription]) -> List[DuplicateGroup]:
    """Flag categories where several subscriptions may overlap."""
    by_category: Dict[str, List[Subscription]] = OrderedDict()
    for sub in subscriptions:
        by_category.setdefault(sub.category or 'Uncategorized', []).append(sub)

    groups: List[DuplicateGroup] = []
    for category, subs in by_category.items():
        if len(subs) < 2:
            continue
        lowered = category.lower()
        if any(hint in lowered for hint in STREAMING_CATEGORY_HINTS):
            groups.append(DuplicateGroup(
                category=category,
                subscriptions=list(subs),
                reason="Multiple streaming services detected",
                recommendation="Consider consolidating to fewer streaming platforms or rotating subscriptions monthly",
            ))

        by_provider: Dict[str, List[Subscription]] = OrderedDict()
        for sub in subs:
            key = _provider_key(sub)
            if key:
                by_provider.setdefault(key, []).append(sub)
        for provider, members in by_provider.items():
            if len(members) > 1:
                groups.append(DuplicateGroup(
                    category=category,
                    subscriptions=members,
                    reason=f"Multiple subscriptions from {provider}",
                    recommendation="Check if these services can be bundled or if one can be eliminated",
                ))

        if len(subs) >= OVERLAP_GROUP_SIZE:
            groups.append(DuplicateGroup(
                category=category,
                subscriptions=list(subs),
                reason=f"Multiple services in {category} category",
                recommendation="Review if all these services are necessary or if some have overlapping features",
            ))
    return groups


@dataclass(frozen=True)
class PriceIncreaseAlert:
    subscription: Subscription
    previous_amount: float
    current_amount: float
    change_date: date

    @property
    def increase(self) -> float:
        return self.current_amount - self.previous_amount

    @property
    def percent_increase(self) -> float:
        if self.previous_amount <= 0:
            return 100.0
        return self.increase / self.previous_amount * 100

    @property
    def annual_impact(self) -> float:
        return monthly_cost(self.increase, self.subscription.billing_cycle) * 12

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.subscription.id,
            'name': self.subscription.name,
            'previous_amount': self.previous_amount,
            'current_amount': self.current_amount,
            'increase': self.increase,
            'percent_increase': self.percent_increase,
            'annual_impact': self.annual_impact,
            'change_date': self.change_date.isoformat(),
        }


def price_increase_alerts(
    subscriptions: Iterable[Subscription],
    history: Iterable[Any],
    min_percent: float = 0.0,
) -> List[PriceIncreaseAlert]:
    """Compare each subscription's price with its last different historical price.

    ``history`` items need ``subscription_id``, ``amount`` and ``change_date``
    attributes (see :class:`bills_dashboard.db.PriceChange`).
    """
    changes: Dict[str, List[Any]] = {}
    for entry in history:
        changes.setdefault(str(entry.subscription_id), []).append(entry)

    alerts: List[PriceIncreaseAlert] = []
    for sub in subscriptions:
        entries = sorted(changes.get(sub.id, []), key=lambda e: e.change_date)
        previous = next((e for e in reversed(entries) if abs(e.amount - sub.amount) > 1e-9), None)
        if previous is None or sub.amount <= previous.amount:
            continue
        later = [e for e in entries if e.change_date > previous.change_date]
        changed_on = later[0].change_date if later else previous.change_date
        alert = PriceIncreaseAlert(
            subscription=sub,
            previous_amount=previous.amount,
            current_amount=sub.amount,
            change_date=changed_on,
        )
        if alert.percent_increase > min_percent:
            alerts.append(alert)
    return sorted(alerts, key=lambda a: a.percent_increase, reverse=True)


def upcoming_payments(
    obligations: Iterable[Obligation],
    today: date,
    within_days: int = 30,
) -> List[Obligation]:
    """Obligations due between ``today`` and ``today + within_days``, soonest first."""
    horizon = today + timedelta(days=within_days)
    due = [item for item in obligations if today <= item.due_date <= horizon]
    return sorted(due, key=lambda item: item.due_date)


def low_usage(subscriptions: Iterable[Subscription], threshold: float = 50.0) -> List[Subscription]:
    return [sub for sub in subscriptions if sub.usage < threshold]
