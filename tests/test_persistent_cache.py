"""Tests for the scheduler preferences cache."""

from __future__ import annotations

from bills_dashboard.persistent_cache import DEFAULT_CACHE, load_cache, save_cache


def test_missing_file_gives_defaults(tmp_path) -> None:
    assert load_cache(tmp_path / 'missing.json') == DEFAULT_CACHE


def test_round_trip_drops_unknown_keys(tmp_path) -> None:
    path = tmp_path / 'nested' / 'prefs.json'
    save_cache({'policy': 'late', 'monthly_income': 4200.0, 'junk': 1}, path)

    loaded = load_cache(path)

    assert loaded['policy'] == 'late'
    assert loaded['monthly_income'] == 4200.0
    assert loaded['income_days'] == DEFAULT_CACHE['income_days']
    assert 'junk' not in loaded


def test_corrupt_file_falls_back(tmp_path) -> None:
    path = tmp_path / 'prefs.json'
    path.write_text('{not json', encoding='utf-8')
    assert load_cache(path) == DEFAULT_CACHE

    path.write_text('[1, 2]', encoding='utf-8')
    assert load_cache(path) == DEFAULT_CACHE
