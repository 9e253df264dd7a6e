"""Exceptions raised by the bills dashboard."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised for amounts, incomes or options that cannot be used in a calculation."""


class InvalidPeriodError(ValueError):
    """Raised when a year/month pair or a date falls outside the supported range."""


class AuthenticationError(RuntimeError):
    """Raised when no current user can be resolved."""
