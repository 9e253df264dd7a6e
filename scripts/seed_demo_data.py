#!/usr/bin/env python3
"""Load a handful of sample bills and subscriptions into the local database."""

from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bills_dashboard import config
from bills_dashboard.db import BillsRepository
from bills_dashboard.models import Bill, Subscription, YearMonth

DEMO_USER = 'demo'


def demo_bills(month: YearMonth) -> List[Bill]:
    return [
        Bill('rent', 'Rent', 1850.0, month.clamp_day(1), 'Housing', recurring=True),
        Bill('electric', 'Electric Company', 142.35, month.clamp_day(10), 'Utilities', recurring=True),
        Bill('water', 'City Water', 48.20, month.clamp_day(10), 'Utilities', recurring=True),
        Bill('car-insurance', 'Car Insurance', 118.00, month.clamp_day(18), 'Insurance', recurring=True, auto_pay=True),
        Bill('car-loan', 'Auto Loan', 325.00, month.clamp_day(22), 'Debt Payments', recurring=True),
        Bill('dentist', 'Dentist', 90.00, month.clamp_day(27), 'Healthcare'),
    ]


def demo_subscriptions(month: YearMonth) -> List[Subscription]:
    return [
        Subscription('netflix', 'Netflix', 15.49, month.clamp_day(12), 'Entertainment',
                     provider='Netflix', usage=85, value=80),
        Subscription('hulu', 'Hulu', 17.99, month.clamp_day(20), 'Entertainment',
                     provider='Disney', usage=20, value=40),
        Subscription('disney', 'Disney+', 13.99, month.clamp_day(20), 'Entertainment',
                     provider='Disney', usage=35, value=50),
        Subscription('ynab', 'YNAB', 99.0, month.clamp_day(3), 'Personal Care',
                     provider='YNAB', billing_cycle='annually', usage=90, value=95),
        Subscription('calm', 'Calm', 14.99, month.clamp_day(28), 'Healthcare',
                     provider='Calm', usage=15, value=30),
        Subscription('gym', 'Gym Membership', 45.00, month.clamp_day(5), 'Healthcare',
                     provider='FitLife', usage=60, value=85),
    ]


def main(user_id: str, db_path: str | None = None, clear: bool = False) -> None:
    repository = BillsRepository(db_path or config.DB_PATH)
    repository.init_db()
    if clear:
        repository.clear()
        print("Cleared existing bills and subscriptions.")

    month = YearMonth.from_date(date.today())
    bills = demo_bills(month)
    subscriptions = demo_subscriptions(month)
    for bill in bills:
        repository.add_bill(user_id, bill)
    for subscription in subscriptions:
        repository.add_subscription(user_id, subscription)

    three_months_ago = date.today() - timedelta(days=90)
    repository.record_price_change('netflix', 13.99, three_months_ago)
    repository.record_price_change('netflix', 15.49, date.today() - timedelta(days=30))
    repository.record_price_change('calm', 12.99, three_months_ago)
    repository.record_price_change('calm', 14.99, date.today() - timedelta(days=14))

    print(f"Seeded {len(bills)} bills and {len(subscriptions)} subscriptions for '{user_id}' "
          f"into {repository.db_path}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Seed demo bills and subscriptions.')
    parser.add_argument('--user', default=DEMO_USER, help='User id to own the demo data')
    parser.add_argument('--db', help='SQLite database path')
    parser.add_argument('--clear', action='store_true', help='Remove existing rows first')
    args = parser.parse_args()
    config.configure_logging()
    main(args.user, args.db, args.clear)
