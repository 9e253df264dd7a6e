#!/usr/bin/env python3
"""Print a month's payment schedule, cash-flow projection and category split."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bills_dashboard import config
from bills_dashboard.auth import default_resolver
from bills_dashboard.db import BillsRepository
from bills_dashboard.errors import AuthenticationError, InvalidInputError, InvalidPeriodError
from bills_dashboard.formatting import format_currency
from bills_dashboard.models import DISTRIBUTION_POLICIES, YearMonth
from bills_dashboard.scheduler import SmartPaymentScheduler
from bills_dashboard import visualization as viz


def main(
    month: str | None,
    income: float,
    policy: str,
    user_id: str | None = None,
    db_path: str | None = None,
    unscheduled: float = 0.0,
) -> int:
    try:
        target = YearMonth.parse(month) if month else YearMonth.from_date(date.today())
        user = user_id or default_resolver().current_user()
    except (InvalidPeriodError, AuthenticationError) as exc:
        print(f"Error: {exc}")
        return 1

    repository = BillsRepository(db_path or config.DB_PATH)
    repository.init_db()
    scheduler = SmartPaymentScheduler(repository)
    try:
        plan = scheduler.plan_for_user(
            user,
            target,
            income,
            policy,
            income_days=config.DEFAULT_INCOME_DAYS,
            unscheduled_expenses=unscheduled,
        )
    except InvalidInputError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"{plan.month.label} ({plan.policy}) for user {user}")
    if not plan.schedule:
        print("Nothing is due this month.")
    else:
        print("\nSchedule:")
        print(viz.schedule_frame(plan.schedule).to_string(index=False))

    print("\nCash flow:")
    print(viz.projection_frame(plan.projection).to_string(index=False))
    print(f"\nLowest balance: {format_currency(plan.lowest_balance)}")
    print(f"Closing balance: {format_currency(plan.closing_balance)}")

    if plan.categories:
        print("\nBy category:")
        print(viz.category_frame(plan.categories).drop(columns=['Color']).to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show the payment schedule for a month.')
    parser.add_argument('--month', help='Month as YYYY-MM (defaults to the current month)')
    parser.add_argument('--income', type=float, default=config.DEFAULT_MONTHLY_INCOME, help='Monthly income')
    parser.add_argument('--policy', choices=DISTRIBUTION_POLICIES, default=config.DEFAULT_POLICY)
    parser.add_argument('--unscheduled', type=float, default=0.0, help='Other monthly spending to spread')
    parser.add_argument('--user', help='User id (defaults to BILLS_USER_ID / BILLS_DEFAULT_USER_ID)')
    parser.add_argument('--db', help='SQLite database path')
    args = parser.parse_args()
    config.configure_logging()
    sys.exit(main(args.month, args.income, args.policy, args.user, args.db, args.unscheduled))
