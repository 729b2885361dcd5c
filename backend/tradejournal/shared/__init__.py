"""
Shared utilities module for cross-cutting concerns.

Coercion helpers used by the trade models and the metrics engine to read
user-entered values without raising.
"""

from tradejournal.shared.validation_helpers import (
    strip_thousands_separators,
    to_choice,
    to_datetime,
    to_decimal,
)

__all__ = ["strip_thousands_separators", "to_choice", "to_datetime", "to_decimal"]
