"""Expense category reference list and category roll-ups."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import DEFAULT_CATEGORY, Category, CategoryTotal, PaymentSchedule

OTHER_COLOR = '#c6dbef'

EXPENSE_CATEGORIES: List[Category] = [
    Category('Housing', '#8884d8'),
    Category('Utilities', '#82ca9d'),
    Category('Insurance', '#ffc658'),
    Category('Transportation', '#ff8042'),
    Category('Food', '#0088fe'),
    Category('Healthcare', '#00c49f'),
    Category('Entertainment', '#ffbb28'),
    Category('Education', '#a4de6c'),
    Category('Personal Care', '#d0ed57'),
    Category('Savings', '#8dd1e1'),
    Category('Debt Payments', '#ff7c43'),
    Category(DEFAULT_CATEGORY, OTHER_COLOR),
]


def category_color(name: str, known_categories: Sequence[Category] = EXPENSE_CATEGORIES) -> str:
    lowered = (name or '').strip().lower()
    for category in known_categories:
        if category.name.lower() == lowered:
            return category.color
    return OTHER_COLOR


def _with_other(known_categories: Sequence[Category]) -> List[Category]:
    """Known categories with case-insensitive repeats dropped and "Other" guaranteed."""
    categories: List[Category] = []
    seen = set()
    for category in known_categories:
        key = category.name.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        categories.append(category)
    if DEFAULT_CATEGORY.lower() not in seen:
        categories.append(Category(DEFAULT_CATEGORY, OTHER_COLOR))
    return categories


def aggregate_categories(
    schedule: Iterable[PaymentSchedule],
    known_categories: Sequence[Category] = EXPENSE_CATEGORIES,
) -> List[CategoryTotal]:
    """Sum scheduled payments per expense category.

    Category names are matched case-insensitively. Anything that does not
    match a known category is counted under ``"Other"``, so the totals always
    add up to the schedule total. Categories with a zero total are omitted.
    """
    categories = _with_other(known_categories)
    lookup: Dict[str, str] = {c.name.strip().lower(): c.name for c in categories}
    other_name = lookup[DEFAULT_CATEGORY.lower()]
    totals: Dict[str, float] = {c.name: 0.0 for c in categories}

    for entry in schedule:
        for item in entry.items:
            name = lookup.get((item.category or '').strip().lower(), other_name)
            totals[name] += item.amount

    return [
        CategoryTotal(category=c.name, amount=totals[c.name], color=c.color)
        for c in categories
        if totals[c.name] > 0
    ]
