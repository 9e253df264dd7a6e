"""Configuration management for the bills dashboard.

This module centralizes all configuration values including paths,
scheduler defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

# Base project root - assumes this file is in bills_dashboard/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BILLS_DATA_DIR", _PROJECT_ROOT / "data"))
CACHE_DIR = DATA_DIR / "cache"

# Database
DB_PATH = Path(
    os.getenv("BILLS_DB_PATH", DATA_DIR / "bills.db")
).resolve()

# Scheduler defaults
DEFAULT_MONTHLY_INCOME = float(os.getenv("BILLS_MONTHLY_INCOME", "5000"))
DEFAULT_POLICY = os.getenv("BILLS_DEFAULT_POLICY", "balanced")
DEFAULT_INCOME_DAYS_RAW = os.getenv("BILLS_INCOME_DAYS", "1,15")

# Identity used when no session user is present
USER_ID_ENV_VAR = "BILLS_USER_ID"
DEFAULT_USER_ID: Optional[str] = os.getenv("BILLS_DEFAULT_USER_ID") or None

LOG_LEVEL = os.getenv("BILLS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_income_days(raw: str) -> Tuple[int, ...]:
    """Turn a comma separated list such as ``"1,15"`` into a tuple of day numbers."""
    days = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        days.append(int(chunk))
    return tuple(days)


DEFAULT_INCOME_DAYS = parse_income_days(DEFAULT_INCOME_DAYS_RAW)


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, CACHE_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for an entry point (dashboard or script)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
