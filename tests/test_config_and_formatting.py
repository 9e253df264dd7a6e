"""Tests for configuration parsing and display formatting."""

from __future__ import annotations

from datetime import date

from bills_dashboard import config
from bills_dashboard.formatting import escape_dollar_for_markdown, format_currency, format_day


def test_parse_income_days() -> None:
    assert config.parse_income_days('1,15') == (1, 15)
    assert config.parse_income_days(' 5 , 20 ,') == (5, 20)
    assert config.parse_income_days('') == ()


def test_format_currency() -> None:
    assert format_currency(1234.5) == '$1,234.50'
    assert format_currency(-12) == '-$12.00'
    assert format_currency(1234.5, include_sign=False) == '1,234.50'
    assert escape_dollar_for_markdown(5) == '\\$5.00'


def test_format_day() -> None:
    assert format_day(date(2024, 3, 10)) == 'Sun, Mar 10'
