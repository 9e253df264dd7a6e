"""Heuristics that point out bills and subscriptions worth renegotiating."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .models import KIND_BILL, KIND_SUBSCRIPTION, Bill, Subscription


@dataclass(frozen=True)
class NegotiationSuggestion:
    id: str
    kind: str
    name: str
    category: str
    current_cost: float
    potential_savings: float
    confidence: float
    reasoning: str
    action_items: List[str] = field(default_factory=list)

    @property
    def confidence_label(self) -> str:
        return confidence_label(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'kind': self.kind,
            'name': self.name,
            'category': self.category,
            'current_cost': self.current_cost,
            'potential_savings': self.potential_savings,
            'confidence': self.confidence,
            'confidence_label': self.confidence_label,
            'reasoning': self.reasoning,
            'action_items': list(self.action_items),
        }


def confidence_label(confidence: float) -> str:
    if confidence >= 0.8:
        return 'High confidence'
    if confidence >= 0.5:
        return 'Medium confidence'
    return 'Low confidence'


UTILITY_ACTIONS = [
    "Call the utility company and ask to speak with the retention department",
    "Research competitor rates before calling",
    "Mention that you're considering switching providers",
    "Ask about any loyalty programs or discounts for long-term customers",
]
INSURANCE_ACTIONS = [
    "Review your current coverage to ensure it's still appropriate",
    "Get quotes from competing insurance providers",
    "Call your current provider and ask about discounts",
    "Inquire about bundling multiple policies for additional savings",
]
LOW_USAGE_ACTIONS = [
    "Review your actual usage of this service",
    "Check if there's a lower tier plan available",
    "Consider cancelling if the service isn't essential",
    "Look for alternative services with better value",
]
HIGH_VALUE_ACTIONS = [
    "Check if an annual plan is available at a discount",
    "Look for family or team plans if applicable",
    "Search for promotional codes or special offers",
    "Contact customer service to ask about loyalty discounts",
]


def _is_category(item_category: str, name: str) -> bool:
    return (item_category or '').strip().lower() == name


def _bill_suggestions(bill: Bill) -> List[NegotiationSuggestion]:
    found = []
    if _is_category(bill.category, 'utilities') and bill.amount > 100:
        found.append(NegotiationSuggestion(
            id=f"bill-{bill.id}-utility",
            kind=KIND_BILL,
            name=bill.name,
            category=bill.category,
            current_cost=bill.amount,
            potential_savings=bill.amount * 0.10,
            confidence=0.7,
            reasoning=(
                "Utility companies often have retention departments that can offer discounts "
                "to prevent customers from switching providers."
            ),
            action_items=list(UTILITY_ACTIONS),
        ))
    if _is_category(bill.category, 'insurance') and bill.amount > 50:
        found.append(NegotiationSuggestion(
            id=f"bill-{bill.id}-insurance",
            kind=KIND_BILL,
            name=bill.name,
            category=bill.category,
            current_cost=bill.amount,
            potential_savings=bill.amount * 0.15,
            confidence=0.8,
            reasoning=(
                "Insurance rates can often be negotiated, especially if you've been a customer for a "
                "long time or have multiple policies with the same provider."
            ),
            action_items=list(INSURANCE_ACTIONS),
        ))
    return found


def _subscription_suggestions(sub: Subscription) -> List[NegotiationSuggestion]:
    found = []
    if sub.usage < 30 and sub.cost > 10:
        found.append(NegotiationSuggestion(
            id=f"sub-{sub.id}-low-usage",
            kind=KIND_SUBSCRIPTION,
            name=sub.name,
            category=sub.category,
            current_cost=sub.cost,
            potential_savings=sub.cost,
            confidence=0.9,
            reasoning=(
                f"This subscription has low usage ({sub.usage:g}%) but significant cost. "
                "Consider cancelling or downgrading to a lower tier."
            ),
            action_items=list(LOW_USAGE_ACTIONS),
        ))
    if sub.value > 80 and sub.cost > 20:
        found.append(NegotiationSuggestion(
            id=f"sub-{sub.id}-high-value",
            kind=KIND_SUBSCRIPTION,
            name=sub.name,
            category=sub.category,
            current_cost=sub.cost,
            potential_savings=sub.cost * 0.20,
            confidence=0.6,
            reasoning=(
                "This is a high-value subscription that you use frequently. There may be annual "
                "plans or family plans available at a discount."
            ),
            action_items=list(HIGH_VALUE_ACTIONS),
        ))
    return found


def generate_suggestions(
    bills: Iterable[Bill],
    subscriptions: Iterable[Subscription],
) -> List[NegotiationSuggestion]:
    """Suggestions for every bill rule followed by every subscription rule."""
    suggestions: List[NegotiationSuggestion] = []
    for bill in bills:
        suggestions.extend(_bill_suggestions(bill))
    for sub in subscriptions:
        suggestions.extend(_subscription_suggestions(sub))
    return suggestions


def total_potential_savings(suggestions: Iterable[NegotiationSuggestion]) -> float:
    return sum(s.potential_savings for s in suggestions)


def filter_suggestions(
    suggestions: Iterable[NegotiationSuggestion],
    kind: Optional[str] = None,
) -> List[NegotiationSuggestion]:
    """Keep suggestions of ``kind`` (``"bill"`` or ``"subscription"``); ``None`` or ``"all"`` keeps everything."""
    if kind in (None, 'all'):
        return list(suggestions)
    return [s for s in suggestions if s.kind == kind]
