"""Lightweight persistent cache for the scheduler's user-facing preferences."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .config import CACHE_DIR, DEFAULT_INCOME_DAYS, DEFAULT_MONTHLY_INCOME, DEFAULT_POLICY

logger = logging.getLogger(__name__)

CACHE_PATH = CACHE_DIR / 'scheduler_preferences.json'
DEFAULT_CACHE: Dict[str, Any] = {
    'monthly_income': DEFAULT_MONTHLY_INCOME,
    'policy': DEFAULT_POLICY,
    'income_days': list(DEFAULT_INCOME_DAYS),
    'unscheduled_expenses': 0.0,
    'month': '',
}


def load_cache(path: Path | None = None) -> Dict[str, Any]:
    target = path or CACHE_PATH
    if not target.exists():
        return DEFAULT_CACHE.copy()
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable preferences file %s: %s", target, exc)
        return DEFAULT_CACHE.copy()
    if not isinstance(data, dict):
        return DEFAULT_CACHE.copy()
    merged = DEFAULT_CACHE.copy()
    merged.update({k: v for k, v in data.items() if k in DEFAULT_CACHE})
    return merged


def save_cache(cache: Dict[str, Any], path: Path | None = None) -> None:
    target = path or CACHE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {k: v for k, v in cache.items() if k in DEFAULT_CACHE}
    with target.open('w', encoding='utf-8') as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)
