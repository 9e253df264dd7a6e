"""SQLite storage for bills, subscriptions and subscription price history.

The repository is created with an explicit database path and opens a
connection per call, so callers (and tests) decide which store they talk
to.  Rows are validated into :mod:`bills_dashboard.models` objects here;
rows that cannot be turned into a valid bill or subscription are skipped
and logged.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

import pandas as pd

from .config import DB_PATH
from .errors import InvalidInputError
from .models import Bill, Subscription

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS bills (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    amount REAL NOT NULL,
    due_date TEXT NOT NULL,
    category TEXT,
    is_recurring INTEGER NOT NULL DEFAULT 0,
    frequency TEXT DEFAULT 'monthly',
    auto_pay INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'pending',
    is_paid INTEGER NOT NULL DEFAULT 0,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS subscriptions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    provider TEXT,
    amount REAL NOT NULL,
    billing_cycle TEXT NOT NULL DEFAULT 'monthly',
    next_billing_date TEXT NOT NULL,
    category TEXT,
    usage_score REAL,
    value_score REAL,
    status TEXT NOT NULL DEFAULT 'active',
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS subscription_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subscription_id TEXT NOT NULL REFERENCES subscriptions(id) ON DELETE CASCADE,
    amount REAL NOT NULL,
    billing_cycle TEXT NOT NULL,
    change_date TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_bills_user ON bills (user_id);
CREATE INDEX IF NOT EXISTS ix_bills_due_date ON bills (due_date);
CREATE INDEX IF NOT EXISTS ix_subscriptions_user ON subscriptions (user_id);
CREATE INDEX IF NOT EXISTS ix_subscriptions_next_billing ON subscriptions (next_billing_date);
CREATE INDEX IF NOT EXISTS ix_subscription_history_sub ON subscription_history (subscription_id);
"""


@dataclass(frozen=True)
class PriceChange:
    subscription_id: str
    amount: float
    billing_cycle: str
    change_date: date


def _to_iso_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        # pandas Timestamp or datetime
        if hasattr(value, 'to_pydatetime'):
            value = value.to_pydatetime()
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        ts = pd.to_datetime(value, errors='coerce')
        if pd.isna(ts):
            return None
        return ts.date().isoformat()
    except (TypeError, ValueError):
        return None


def _to_date(value: Any) -> Optional[date]:
    iso = _to_iso_date(value)
    return date.fromisoformat(iso) if iso else None


def _parse_amount(value: Any) -> Optional[float]:
    """Convert different textual amount representations into floats."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        # Handle accounting negatives e.g. (123.45)
        if cleaned.startswith("(") and cleaned.endswith(")"):
            cleaned = f"-{cleaned[1:-1]}"
        value = cleaned.replace("$", "").replace(",", "")
    parsed = pd.to_numeric([value], errors='coerce')
    number = parsed[0]
    if pd.isna(number):
        return None
    return float(number)


def _optional_score(value: Any, default: float = 50.0) -> float:
    number = _parse_amount(value)
    return default if number is None else number


def _sanitize_db_value(value: Any) -> Any:
    """Convert pandas NA/NaT and empty strings to SQLite-friendly values."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    if pd.isna(value):
        return None
    return value


@contextmanager
def connect(db_path: Union[str, Path]) -> Iterator[sqlite3.Connection]:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    try:
        yield conn
    finally:
        conn.close()


class BillsRepository:
    """Data access for one SQLite database file."""

    def __init__(self, db_path: Union[str, Path, None] = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH

    def init_db(self) -> None:
        with connect(self.db_path) as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _read(self, sql: str, params: List[Any]) -> pd.DataFrame:
        with connect(self.db_path) as conn:
            return pd.read_sql_query(sql, conn, params=params)

    # -- reads -----------------------------------------------------------------

    def list_bills(self, user_id: str, recurring_only: bool = False) -> List[Bill]:
        sql = "SELECT * FROM bills WHERE user_id = ?"
        params: List[Any] = [user_id]
        if recurring_only:
            sql += " AND is_recurring = 1"
        sql += " ORDER BY due_date ASC, id ASC"
        df = self._read(sql, params)

        bills: List[Bill] = []
        for row in df.to_dict('records'):
            bill = _bill_from_row(row)
            if bill is not None:
                bills.append(bill)
        logger.debug("Loaded %d of %d bill rows for user %s", len(bills), len(df), user_id)
        return bills

    def list_subscriptions(self, user_id: str, active_only: bool = True) -> List[Subscription]:
        sql = "SELECT * FROM subscriptions WHERE user_id = ?"
        params: List[Any] = [user_id]
        if active_only:
            sql += " AND status = 'active'"
        sql += " ORDER BY next_billing_date ASC, id ASC"
        df = self._read(sql, params)

        subscriptions: List[Subscription] = []
        for row in df.to_dict('records'):
            subscription = _subscription_from_row(row)
            if subscription is not None:
                subscriptions.append(subscription)
        logger.debug(
            "Loaded %d of %d subscription rows for user %s", len(subscriptions), len(df), user_id
        )
        return subscriptions

    def list_price_history(self, user_id: str) -> List[PriceChange]:
        sql = (
            "SELECT h.subscription_id, h.amount, h.billing_cycle, h.change_date "
            "FROM subscription_history h JOIN subscriptions s ON s.id = h.subscription_id "
            "WHERE s.user_id = ? ORDER BY h.change_date ASC, h.id ASC"
        )
        df = self._read(sql, [user_id])
        history: List[PriceChange] = []
        for row in df.to_dict('records'):
            amount = _parse_amount(row.get('amount'))
            changed = _to_date(row.get('change_date'))
            if amount is None or changed is None:
                logger.warning("Skipping malformed price history row for %s", row.get('subscription_id'))
                continue
            history.append(PriceChange(
                subscription_id=str(row['subscription_id']),
                amount=amount,
                billing_cycle=row.get('billing_cycle') or 'monthly',
                change_date=changed,
            ))
        return history

    # -- writes ----------------------------------------------------------------

    def add_bill(self, user_id: str, bill: Bill) -> str:
        with connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO bills (id, user_id, name, amount, due_date, category, is_recurring, "
                "frequency, auto_pay, status, is_paid, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    bill.id, user_id, bill.name, bill.amount, bill.due_date.isoformat(),
                    _sanitize_db_value(bill.category), int(bill.recurring), bill.frequency,
                    int(bill.auto_pay), bill.status, int(bill.is_paid), datetime.now(timezone.utc).isoformat(),
                ),
            )
            conn.commit()
        return bill.id

    def add_subscription(self, user_id: str, subscription: Subscription) -> str:
        with connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO subscriptions (id, user_id, name, provider, amount, billing_cycle, "
                "next_billing_date, category, usage_score, value_score, status, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    subscription.id, user_id, subscription.name, _sanitize_db_value(subscription.provider),
                    subscription.amount, subscription.billing_cycle, subscription.due_date.isoformat(),
                    _sanitize_db_value(subscription.category), subscription.usage, subscription.value,
                    subscription.status, datetime.now(timezone.utc).isoformat(),
                ),
            )
            conn.commit()
        return subscription.id

    def record_price_change(
        self,
        subscription_id: str,
        amount: float,
        change_date: date,
        billing_cycle: str = 'monthly',
    ) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                "INSERT INTO subscription_history (subscription_id, amount, billing_cycle, change_date) "
                "VALUES (?, ?, ?, ?)",
                (subscription_id, amount, billing_cycle, _to_iso_date(change_date)),
            )
            conn.commit()

    def clear(self) -> None:
        with connect(self.db_path) as conn:
            conn.execute("DELETE FROM subscription_history")
            conn.execute("DELETE FROM subscriptions")
            conn.execute("DELETE FROM bills")
            conn.commit()


def _bill_from_row(row: dict) -> Optional[Bill]:
    amount = _parse_amount(row.get('amount'))
    due = _to_date(row.get('due_date'))
    if amount is None or due is None:
        logger.warning("Skipping bill %s: missing amount or due date", row.get('id'))
        return None
    try:
        return Bill(
            id=row['id'],
            name=row.get('name') or 'Unnamed bill',
            amount=amount,
            due_date=due,
            category=_sanitize_db_value(row.get('category')),
            recurring=bool(row.get('is_recurring')),
            frequency=row.get('frequency') or 'monthly',
            auto_pay=bool(row.get('auto_pay')),
            status=row.get('status') or 'pending',
            is_paid=bool(row.get('is_paid')),
        )
    except InvalidInputError as exc:
        logger.warning("Skipping bill %s: %s", row.get('id'), exc)
        return None


def _subscription_from_row(row: dict) -> Optional[Subscription]:
    amount = _parse_amount(row.get('amount'))
    due = _to_date(row.get('next_billing_date'))
    if amount is None or due is None:
        logger.warning("Skipping subscription %s: missing amount or billing date", row.get('id'))
        return None
    try:
        return Subscription(
            id=row['id'],
            name=row.get('name') or 'Unnamed subscription',
            amount=amount,
            due_date=due,
            category=_sanitize_db_value(row.get('category')),
            provider=_sanitize_db_value(row.get('provider')) or '',
            billing_cycle=row.get('billing_cycle') or 'monthly',
            usage=_optional_score(row.get('usage_score')),
            value=_optional_score(row.get('value_score')),
            status=row.get('status') or 'active',
        )
    except InvalidInputError as exc:
        logger.warning("Skipping subscription %s: %s", row.get('id'), exc)
        return None
