"""
Shared coercion helpers for user-entered journal values.

Journal records arrive from forms, local caches and exported files, so any
field may be blank, mistyped or missing. These helpers convert such values
without raising and report whether a non-empty input had to be discarded,
so callers can flag it.

Coercion Rules:
    - Numbers: None/"" -> 0 (not flagged); non-numeric text, booleans,
      NaN, infinities and magnitudes of 1e100 or more -> 0 (flagged)
    - Commas count only as thousands separators ("1,250.50"); any other
      comma ("1,5") makes the text non-numeric
    - Dates: date, datetime or ISO-8601 text; anything else -> None (flagged)
    - Choices: case-insensitive lookup; unknown text -> default (flagged)
"""

import math
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, TypeVar

ZERO = Decimal("0")

# Larger values are not journal amounts and overflow once multiplied
MAX_MAGNITUDE = Decimal("1e100")

THOUSANDS_PATTERN = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")

E = TypeVar("E", bound=Enum)


def to_decimal(value: Any) -> tuple[Decimal, bool]:
    """
    Coerce a user-entered value to Decimal, never raising.

    Floats go through str() so 1.08 stays Decimal("1.08") instead of its
    binary expansion. Thousands separators in text are ignored.

    Args:
        value: Raw input value

    Returns:
        Tuple of (decimal_value, was_coerced)

    Example:
        >>> to_decimal("1.0800")
        (Decimal('1.0800'), False)
        >>> to_decimal("abc")
        (Decimal('0'), True)
    """
    if value is None:
        return ZERO, False
    if isinstance(value, bool):
        return ZERO, True
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return ZERO, True
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO, False
        text = strip_thousands_separators(text)
        if text is None:
            return ZERO, True
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return ZERO, True
    else:
        return ZERO, True

    if not parsed.is_finite() or abs(parsed) >= MAX_MAGNITUDE:
        return ZERO, True
    return parsed, False


def strip_thousands_separators(text: str) -> Optional[str]:
    """
    Remove thousands separators from numeric text.

    Returns:
        The text without commas, or None when a comma is not a
        thousands separator

    Example:
        >>> strip_thousands_separators("1,250.50")
        '1250.50'
        >>> strip_thousands_separators("1,5") is None
        True
    """
    if "," not in text:
        return text
    if not THOUSANDS_PATTERN.match(text):
        return None
    return text.replace(",", "")


def to_datetime(value: Any) -> tuple[Optional[datetime], bool]:
    """
    Parse a journal date, returning (value, was_coerced).

    Plain dates become midnight datetimes. Timezone offsets are dropped so
    the wall-clock time the user entered is kept and all values compare.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, False
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None, True
    else:
        return None, True
    return parsed.replace(tzinfo=None), False


def to_choice(value: Any, words: dict[str, E], default: E) -> tuple[E, bool]:
    """Map free text onto an enum member, returning (member, was_coerced)."""
    if value is None:
        return default, False
    text = str(value.value if isinstance(value, Enum) else value).strip().lower()
    if not text:
        return default, False
    if text in words:
        return words[text], False
    return default, True
