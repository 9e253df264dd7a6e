"""Smart Payment Scheduler page - plan when bills and subscriptions get paid.

Run with ``streamlit run bills_dashboard/dashboard.py`` or via
``run_dashboard.py`` at the project root.
"""

from __future__ import annotations

import logging
import sqlite3
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import streamlit as st

# Ensure package imports resolve when run as a Streamlit script
PARENT = Path(__file__).parent.parent
if str(PARENT) not in sys.path:
    sys.path.insert(0, str(PARENT))

from bills_dashboard import config
from bills_dashboard.auth import default_resolver
from bills_dashboard.cash_flow import MAX_INCOME_DAY
from bills_dashboard.db import BillsRepository
from bills_dashboard.errors import AuthenticationError, InvalidInputError, InvalidPeriodError
from bills_dashboard.formatting import escape_dollar_for_markdown, format_currency, format_day
from bills_dashboard.models import (
    DISTRIBUTION_POLICIES,
    KIND_BILL,
    KIND_SUBSCRIPTION,
    Bill,
    Subscription,
    YearMonth,
)
from bills_dashboard.negotiation import filter_suggestions, generate_suggestions, total_potential_savings
from bills_dashboard.persistent_cache import load_cache as _cache_load_impl, save_cache as _cache_save_impl
from bills_dashboard.scheduler import SchedulePlan, SmartPaymentScheduler
from bills_dashboard.subscriptions import (
    find_duplicate_services,
    low_usage,
    monthly_cost_by_category,
    price_increase_alerts,
    roi_summary,
    upcoming_payments,
)
from bills_dashboard.timeline import bills_summary, calendar_grid, group_payments_by_month
from bills_dashboard import visualization as viz

logger = logging.getLogger(__name__)

PREFERENCES_KEY = 'scheduler_preferences'
MONTH_CHOICES_BACK = 3
MONTH_CHOICES_AHEAD = 9

STRATEGY_DESCRIPTIONS = {
    'balanced': (
        "Payments are scheduled on their original due dates. This approach maintains your current "
        "payment schedule but may result in uneven cash flow."
    ),
    'early': (
        "Payments are moved to the beginning of the month. This approach helps you get bills out of "
        "the way early, but requires having funds available at the start of the month."
    ),
    'late': (
        "Payments are moved to the end of the month. This approach maximizes the time your money stays "
        "in your account, but may result in a larger outflow at the end of the month."
    ),
}


def main() -> None:
    config.configure_logging()
    config.ensure_data_directories()
    st.set_page_config(page_title="Smart Payment Scheduler", page_icon="📅", layout="wide")
    st.header("📅 Smart Payment Scheduler")
    st.caption("Optimize your payment schedule to improve cash flow")

    prefs = _ensure_preferences()
    today = date.today()
    prefs = _render_controls(prefs, today)

    try:
        user_id = default_resolver(st.session_state).current_user()
    except AuthenticationError as exc:
        st.warning(str(exc))
        return

    repository = BillsRepository(config.DB_PATH)
    scheduler = SmartPaymentScheduler(repository)
    try:
        repository.init_db()
        bills, subscriptions, history, obligations = _load_page_data(scheduler, user_id)
    except sqlite3.Error as exc:
        logger.exception("Could not load data for %s", user_id)
        st.error(f"Could not load bills and subscriptions: {exc}")
        return

    if not bills and not subscriptions:
        st.info("Add some bills or subscriptions to build a payment schedule.")
        return

    month = _selected_month(prefs, today)
    try:
        plan = scheduler.plan(
            obligations,
            month,
            prefs['monthly_income'],
            prefs['policy'],
            income_days=prefs['income_days'],
            unscheduled_expenses=prefs['unscheduled_expenses'],
        )
    except (InvalidInputError, InvalidPeriodError) as exc:
        st.error(str(exc))
        return

    schedule_tab, cash_tab, category_tab, subs_tab, negotiate_tab, timeline_tab = st.tabs([
        "🗓 Schedule",
        "📈 Cash Flow",
        "🥧 Categories",
        "🔁 Subscriptions",
        "🤝 Negotiation",
        "⏱ Timeline",
    ])
    with schedule_tab:
        _render_schedule(plan, obligations)
    with cash_tab:
        _render_cash_flow(plan)
    with category_tab:
        _render_categories(plan)
    with subs_tab:
        _render_subscriptions(subscriptions, history)
    with negotiate_tab:
        _render_negotiation(obligations)
    with timeline_tab:
        _render_timeline(bills, subscriptions, today)


def _load_page_data(scheduler: SmartPaymentScheduler, user_id: str):
    """All bills, active subscriptions, price history and the obligations the scheduler plans."""
    repository = scheduler.repository
    bills = repository.list_bills(user_id)
    subscriptions = repository.list_subscriptions(user_id)
    history = repository.list_price_history(user_id)
    obligations = scheduler.load_obligations(user_id)
    return bills, subscriptions, history, obligations


def _render_controls(prefs: Dict[str, Any], today: date) -> Dict[str, Any]:
    st.sidebar.subheader("⚙️ Scheduler Settings")
    options = _month_options(today)
    current = _selected_month(prefs, today)
    if current not in options:
        options.append(current)
        options.sort()
    month = st.sidebar.selectbox(
        "Month",
        options,
        index=options.index(current),
        format_func=lambda m: m.label,
    )
    income = st.sidebar.number_input(
        "Monthly income",
        min_value=0.0,
        value=float(prefs['monthly_income']),
        step=100.0,
    )
    extra = st.sidebar.number_input(
        "Other monthly spending",
        min_value=0.0,
        value=float(prefs['unscheduled_expenses']),
        step=50.0,
        help="Spending not tied to a bill or subscription; spread according to the strategy.",
    )
    policy = st.sidebar.radio(
        "Payment strategy",
        DISTRIBUTION_POLICIES,
        index=DISTRIBUTION_POLICIES.index(prefs['policy']) if prefs['policy'] in DISTRIBUTION_POLICIES else 1,
        format_func=str.title,
    )
    st.sidebar.caption(STRATEGY_DESCRIPTIONS[policy])

    updated = dict(prefs, month=str(month), monthly_income=income, unscheduled_expenses=extra, policy=policy)
    if updated != prefs:
        st.session_state[PREFERENCES_KEY] = updated
        _persist_preferences()
    return updated


def _render_schedule(plan: SchedulePlan, obligations: List[Any]) -> None:
    if not plan.schedule:
        st.info("There are no bills or subscriptions due in the selected month.")
        return
    st.markdown(
        f"**{len(plan.schedule)}** payment dates totalling "
        f"**{escape_dollar_for_markdown(plan.total_scheduled)}** in {plan.month.label}"
    )
    st.plotly_chart(viz.create_schedule_bar_chart(plan.schedule), use_container_width=True)
    for entry in plan.schedule:
        with st.expander(f"{format_day(entry.date)} · {format_currency(entry.total_amount)}"):
            for item in entry.items:
                st.write(f"{item.name} ({item.kind}, {item.category}) - {format_currency(item.amount)}")

    grid = calendar_grid(obligations, plan.month)
    calendar_df = pd.DataFrame(
        [[_calendar_cell(day) for day in grid[week * 7:(week + 1) * 7]] for week in range(6)],
        columns=['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat'],
    )
    st.subheader("Calendar")
    st.dataframe(calendar_df, hide_index=True, use_container_width=True)


def _calendar_cell(day) -> str:
    if not day.in_month:
        return ''
    if not day.items:
        return str(day.date.day)
    return f"{day.date.day} · {format_currency(day.total)}"


def _render_cash_flow(plan: SchedulePlan) -> None:
    col_income, col_spend, col_low = st.columns(3)
    col_income.metric("Monthly income", format_currency(plan.monthly_income))
    col_spend.metric("Scheduled payments", format_currency(plan.total_scheduled))
    col_low.metric("Lowest balance", format_currency(plan.lowest_balance))
    if plan.lowest_balance < 0:
        st.warning("The projected balance dips below zero this month. Consider the 'late' strategy.")
    st.plotly_chart(viz.create_cash_flow_chart(plan.projection), use_container_width=True)
    st.info(STRATEGY_DESCRIPTIONS[plan.policy])


def _render_categories(plan: SchedulePlan) -> None:
    if not plan.categories:
        st.info("There are no expenses scheduled in the selected month.")
        return
    st.plotly_chart(viz.create_category_pie_chart(plan.categories), use_container_width=True)
    st.dataframe(viz.category_frame(plan.categories).drop(columns=['Color']), hide_index=True)


def _render_subscriptions(subscriptions: List[Subscription], history: List[Any]) -> None:
    if not subscriptions:
        st.info("Add subscriptions to see ROI analysis and recommendations.")
        return
    summary = roi_summary(subscriptions)
    col_cost, col_value = st.columns(2)
    col_cost.metric("Monthly subscription cost", format_currency(summary['total_monthly_cost']))
    col_value.metric("Average value score", f"{summary['average_value_score']:.0f}/100")
    st.plotly_chart(viz.create_roi_bar_chart(summary['analyses']), use_container_width=True)
    st.dataframe(pd.DataFrame([a.to_dict() for a in summary['analyses']]), hide_index=True)

    by_category = monthly_cost_by_category(subscriptions)
    st.bar_chart(pd.Series(by_category, name="Monthly cost"))

    rarely_used = low_usage(subscriptions)
    if rarely_used:
        st.warning(
            f"{len(rarely_used)} subscriptions are used less than half as much as they could be: "
            + ", ".join(sub.name for sub in rarely_used)
        )

    st.subheader("Possible duplicates")
    duplicates = find_duplicate_services(subscriptions)
    if not duplicates:
        st.success("No overlapping services found.")
    for group in duplicates:
        st.markdown(f"**{group.reason}** ({group.category}): {', '.join(s.name for s in group.subscriptions)}")
        st.caption(group.recommendation)

    st.subheader("Price increases")
    alerts = price_increase_alerts(subscriptions, history)
    if not alerts:
        st.success("No price increases recorded.")
    for alert in alerts:
        st.markdown(
            f"**{alert.subscription.name}** went from {escape_dollar_for_markdown(alert.previous_amount)} "
            f"to {escape_dollar_for_markdown(alert.current_amount)} ({alert.percent_increase:.1f}%) "
            f"on {alert.change_date.isoformat()}"
        )


def _render_negotiation(obligations: List[Any]) -> None:
    suggestions = generate_suggestions(
        [item for item in obligations if item.kind == KIND_BILL],
        [item for item in obligations if item.kind == KIND_SUBSCRIPTION],
    )
    st.metric("Potential monthly savings", format_currency(total_potential_savings(suggestions)))
    kind = st.radio("Show", ['all', 'bill', 'subscription'], horizontal=True, format_func=str.title)
    shown = filter_suggestions(suggestions, kind)
    if not shown:
        st.info("We couldn't find any opportunities for savings at this time.")
        return
    for suggestion in shown:
        with st.expander(
            f"{suggestion.name} · save {format_currency(suggestion.potential_savings)} "
            f"({suggestion.confidence_label})"
        ):
            st.write(suggestion.reasoning)
            for action in suggestion.action_items:
                st.markdown(f"- {action}")


def _render_timeline(bills: List[Bill], subscriptions: List[Subscription], today: date) -> None:
    summary = bills_summary(bills, today)
    cols = st.columns(4)
    cols[0].metric("Total due", format_currency(summary['total_due']))
    cols[1].metric("Overdue", format_currency(summary['overdue']))
    cols[2].metric("Due within 7 days", format_currency(summary['due_soon']))
    cols[3].metric("Later", format_currency(summary['upcoming']))
    st.caption(f"{summary['unpaid_count']} unpaid bills")

    due_next = upcoming_payments([*bills, *subscriptions], today)
    if due_next:
        st.markdown("**Next 30 days**")
        st.dataframe(
            pd.DataFrame([
                {'Due': payment.due_date, 'Name': payment.name, 'Amount': payment.amount}
                for payment in due_next if not payment.paid
            ]),
            hide_index=True,
        )

    status = st.radio("Status", ['upcoming', 'overdue', 'paid'], horizontal=True, format_func=str.title)
    groups = group_payments_by_month([*bills, *subscriptions], today, status)
    if not groups:
        st.info(f"You have no {status} payments")
        return
    for label, group in groups.items():
        st.markdown(f"**{label}** · {escape_dollar_for_markdown(group.total)}")
        for payment in group.payments:
            st.write(f"{format_day(payment.due_date)} - {payment.name}: {format_currency(payment.amount)}")


def _month_options(today: date) -> List[YearMonth]:
    current = YearMonth.from_date(today)
    return [current.shift(offset) for offset in range(-MONTH_CHOICES_BACK, MONTH_CHOICES_AHEAD + 1)]


def _selected_month(prefs: Dict[str, Any], today: date) -> YearMonth:
    raw = prefs.get('month') or ''
    try:
        return YearMonth.parse(raw)
    except InvalidPeriodError:
        return YearMonth.from_date(today)


def _load_preferences() -> Dict[str, Any]:
    try:
        data = _cache_load_impl()
    except (OSError, ValueError):  # pragma: no cover - safeguard runtime issues
        logger.warning("Falling back to default scheduler preferences", exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def _default_preferences() -> Dict[str, Any]:
    return {
        'monthly_income': config.DEFAULT_MONTHLY_INCOME,
        'policy': config.DEFAULT_POLICY,
        'income_days': list(config.DEFAULT_INCOME_DAYS),
        'unscheduled_expenses': 0.0,
        'month': '',
    }


def _clean_preferences(loaded: Dict[str, Any]) -> Dict[str, Any]:
    """Merge stored preferences over the defaults, dropping values of the wrong shape."""
    prefs = _default_preferences()
    for key in ('monthly_income', 'unscheduled_expenses'):
        if key not in loaded:
            continue
        value = loaded[key]
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            logger.warning("Ignoring stored %s=%r", key, value)
            continue
        number = pd.to_numeric(pd.Series([value]), errors='coerce').iloc[0]
        if pd.isna(number) or not np.isfinite(number) or number < 0:
            logger.warning("Ignoring stored %s=%r", key, value)
            continue
        prefs[key] = float(number)

    policy = str(loaded.get('policy', prefs['policy'])).strip().lower()
    if policy in DISTRIBUTION_POLICIES:
        prefs['policy'] = policy
    else:
        logger.warning("Ignoring stored policy=%r", loaded.get('policy'))

    days = loaded.get('income_days')
    if isinstance(days, list) and days and all(
        isinstance(day, int) and not isinstance(day, bool) and 1 <= day <= MAX_INCOME_DAY for day in days
    ) and len(set(days)) == len(days):
        prefs['income_days'] = days
    elif days is not None:
        logger.warning("Ignoring stored income_days=%r", days)

    if isinstance(loaded.get('month'), str):
        prefs['month'] = loaded['month']
    return prefs


def _ensure_preferences() -> Dict[str, Any]:
    existing: Optional[Dict[str, Any]] = st.session_state.get(PREFERENCES_KEY)
    if existing is not None:
        return existing
    prefs = _clean_preferences(_load_preferences())
    st.session_state[PREFERENCES_KEY] = prefs
    return prefs


def _persist_preferences() -> None:
    prefs = st.session_state.get(PREFERENCES_KEY)
    if prefs is None:
        return
    try:
        _cache_save_impl(prefs)
    except OSError:
        logger.warning("Could not save scheduler preferences", exc_info=True)


if __name__ == '__main__':
    main()
