"""Tests for subscription ROI, duplicate detection and price alerts."""

from __future__ import annotations

from datetime import date

import pytest

from bills_dashboard.db import PriceChange
from bills_dashboard.models import Bill, Subscription
from bills_dashboard.subscriptions import (
    analyze_roi,
    find_duplicate_services,
    low_usage,
    monthly_cost,
    monthly_cost_by_category,
    price_increase_alerts,
    roi_summary,
    upcoming_payments,
)


def _sub(id_, amount, usage=50, value=50, category='Entertainment', provider='', cycle='monthly'):
    return Subscription(
        id_, id_.title(), amount, date(2024, 3, 15), category,
        provider=provider, billing_cycle=cycle, usage=usage, value=value,
    )


def test_monthly_cost_by_billing_cycle() -> None:
    assert monthly_cost(120.0, 'annually') == pytest.approx(10.0)
    assert monthly_cost(30.0, 'Quarterly') == pytest.approx(10.0)
    assert monthly_cost(10.0, 'weekly') == pytest.approx(43.3)
    assert monthly_cost(10.0, 'fortnightly') == 10.0
    assert monthly_cost(10.0, None) == 10.0


def test_low_usage_recommends_cancelling() -> None:
    analysis = analyze_roi(_sub('hulu', 17.99, usage=20, value=40))

    assert analysis.cost_per_use == pytest.approx(89.95)
    assert analysis.roi_percentage == 200
    assert analysis.recommendation.startswith("Consider cancelling")


@pytest.mark.parametrize('usage, value, cost, expected', [
    (40, 60, 25.0, "Evaluate if this subscription"),
    (90, 95, 25.0, "This is a high-value subscription"),
    (90, 30, 5.0, "The return on investment is low"),
    (50, 60, 5.0, "This subscription provides good value"),
])
def test_recommendation_rules(usage, value, cost, expected) -> None:
    assert analyze_roi(_sub('x', cost, usage=usage, value=value)).recommendation.startswith(expected)


def test_zero_usage_does_not_divide_by_zero() -> None:
    analysis = analyze_roi(_sub('idle', 5.0, usage=0, value=50))

    assert analysis.cost_per_use == 5.0
    assert analysis.roi_percentage == 0


def test_roi_summary() -> None:
    subs = [
        _sub('ynab', 120.0, usage=90, value=90, cycle='annually'),
        _sub('calm', 14.99, usage=15, value=30),
    ]

    summary = roi_summary(subs)

    assert summary['total_monthly_cost'] == pytest.approx(24.99)
    assert summary['average_value_score'] == 60
    assert [a.subscription.id for a in summary['analyses']] == ['ynab', 'calm']
    assert roi_summary([]) == {'total_monthly_cost': 0, 'average_value_score': 0.0, 'analyses': []}


def test_monthly_cost_by_category() -> None:
    totals = monthly_cost_by_category([
        _sub('a', 10.0, category='Entertainment'),
        _sub('b', 60.0, category='Software', cycle='annually'),
        _sub('c', 5.0, category='Entertainment'),
    ])
    assert totals == {'Entertainment': 15.0, 'Software': pytest.approx(5.0)}


def test_streaming_overlap_and_shared_provider() -> None:
    subs = [
        _sub('netflix', 15.49, provider='Netflix'),
        _sub('hulu', 17.99, provider='Disney'),
        _sub('disney', 13.99, provider='disney'),
        _sub('gym', 45.0, category='Healthcare', provider='FitLife'),
    ]

    groups = find_duplicate_services(subs)
    reasons = [g.reason for g in groups]

    assert reasons == [
        "Multiple streaming services detected",
        "Multiple subscriptions from disney",
        "Multiple services in Entertainment category",
    ]
    assert [s.id for s in groups[1].subscriptions] == ['hulu', 'disney']
    assert groups[0].to_dict()['subscriptions'] == ['Netflix', 'Hulu', 'Disney']


def test_single_subscriptions_are_not_duplicates() -> None:
    subs = [
        _sub('a', 10.0, category='Software', provider='Adobe'),
        _sub('b', 20.0, category='Software', provider='Adobe'),
        _sub('c', 5.0, category='News', provider='Times'),
    ]

    groups = find_duplicate_services(subs)

    assert len(groups) == 1
    assert groups[0].category == 'Software'
    assert groups[0].reason == "Multiple subscriptions from adobe"


def test_price_increase_alert() -> None:
    netflix = _sub('netflix', 15.49)
    history = [
        PriceChange('netflix', 13.99, 'monthly', date(2024, 1, 1)),
        PriceChange('netflix', 15.49, 'monthly', date(2024, 3, 1)),
    ]

    alerts = price_increase_alerts([netflix, _sub('other', 9.99)], history)

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.previous_amount == 13.99
    assert alert.change_date == date(2024, 3, 1)
    assert alert.increase == pytest.approx(1.5)
    assert alert.percent_increase == pytest.approx(1.5 / 13.99 * 100)
    assert alert.annual_impact == pytest.approx(18.0)
    assert alert.to_dict()['change_date'] == '2024-03-01'


def test_price_drops_and_small_increases_are_not_alerts() -> None:
    cheaper = _sub('cheaper', 8.0)
    bumped = _sub('bumped', 10.1)
    history = [
        PriceChange('cheaper', 10.0, 'monthly', date(2024, 1, 1)),
        PriceChange('bumped', 10.0, 'monthly', date(2024, 1, 1)),
    ]

    assert price_increase_alerts([cheaper], history) == []
    assert price_increase_alerts([bumped], history, min_percent=5.0) == []
    assert len(price_increase_alerts([bumped], history)) == 1


def test_upcoming_payments_window() -> None:
    today = date(2024, 3, 10)
    items = [
        Bill('late', 'Late', 1.0, date(2024, 3, 9)),
        Bill('edge', 'Edge', 1.0, date(2024, 4, 9)),
        Bill('today', 'Today', 1.0, date(2024, 3, 10)),
        Bill('far', 'Far', 1.0, date(2024, 4, 10)),
    ]

    assert [b.id for b in upcoming_payments(items, today)] == ['today', 'edge']


def test_low_usage_threshold() -> None:
    subs = [_sub('a', 1.0, usage=10), _sub('b', 1.0, usage=50), _sub('c', 1.0, usage=49.9)]
    assert [s.id for s in low_usage(subs)] == ['a', 'c']
