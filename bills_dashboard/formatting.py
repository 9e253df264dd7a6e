"""Formatting utilities for currency and date display."""

from __future__ import annotations

from datetime import date
from typing import Union


def escape_dollar_for_markdown(amount: float) -> str:
    """Format a dollar amount and escape the dollar sign for markdown rendering.

    Streamlit markdown treats ``$`` as a LaTeX delimiter, so two amounts in
    one line would otherwise render as italic math.

    Example:
        >>> escape_dollar_for_markdown(1234.56)
        '\\\\$1,234.56'
    """
    return format_currency(amount).replace("$", "\\$")


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount, e.g. ``$1,234.56`` or ``-$12.00``.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    prefix = "-" if amount < 0 else ""
    return f"{prefix}${formatted}" if include_sign else f"{prefix}{formatted}"


def format_day(value: date) -> str:
    """Short label such as ``Sun, Mar 10``."""
    return f"{value:%a}, {value:%b} {value.day}"
