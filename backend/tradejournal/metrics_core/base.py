"""
Base numeric policy and models for journal metrics.

Provides the shared rounding rule, the "infinite" ratio sentinel with its
guarded division, and the small data models consumed by DrawdownCalculator
and EquityAnalyzer.

Rounding:
    All money and ratio outputs are rounded to 2 decimal places with
    ROUND_HALF_UP on exact Decimal values, so 10.005 -> 10.01 and
    -10.005 -> -10.01.

Sentinel:
    INFINITE (Decimal("Infinity")) marks ratios whose denominator is zero
    while the numerator is positive. It compares greater than every finite
    Decimal and is never NaN.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")

INFINITE = Decimal("Infinity")


def is_infinite(value: Optional[Decimal]) -> bool:
    """Return True when value is the INFINITE sentinel."""
    return isinstance(value, Decimal) and value.is_infinite()


def round2(value: Any) -> Decimal:
    """Round to 2 decimal places, half away from zero.

    Floats are converted through str() first so binary representation
    artifacts (10.005 stored as 10.00499...) do not round down.
    INFINITE is returned unchanged.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal quantized to 0.01
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if value.is_infinite():
        return value
    return quantize_places(value, TWO_PLACES, ROUND_HALF_UP)


def quantize_places(value: Decimal, places: Decimal, rounding: Optional[str] = None) -> Decimal:
    """Quantize a finite Decimal to the exponent of places.

    Precision is widened to fit the integer digits of value, so large
    amounts quantize instead of raising InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - places.as_tuple().exponent + 1)
        return value.quantize(places, rounding=rounding)


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide with the journal's zero/infinite policy.

    Returns:
        0 when both values are zero, INFINITE when only the denominator
        is zero and the numerator is positive, numerator / denominator
        otherwise.
    """
    if denominator == 0:
        if numerator > 0:
            return INFINITE
        return ZERO
    return numerator / denominator


@dataclass(frozen=True)
class EquityPoint:
    """Single point on a balance curve for drawdown calculation.

    Attributes:
        timestamp: Time of this balance snapshot
        value: Account balance at this time
    """

    timestamp: datetime
    value: Decimal


@dataclass
class DrawdownPeriod:
    """A single drawdown period with peak, trough, and recovery info.

    Attributes:
        peak_date: Date of peak balance before drawdown
        trough_date: Date of lowest balance
        recovery_date: Date balance recovered to peak (None if ongoing)
        peak_value: Balance at peak
        trough_value: Balance at trough
        drawdown_pct: Drawdown percentage from peak (0-100)
        duration_days: Days from peak to trough
        recovery_days: Days from trough to recovery (None if ongoing)
    """

    peak_date: datetime
    trough_date: datetime
    peak_value: Decimal
    trough_value: Decimal
    drawdown_pct: Decimal
    duration_days: int
    recovery_date: Optional[datetime] = None
    recovery_days: Optional[int] = None


@dataclass
class MetricResult:
    """Generic result container for a calculated metric.

    Attributes:
        name: Name of the metric
        value: Calculated value
        metadata: Optional additional information about the calculation
    """

    name: str
    value: Decimal
    metadata: Optional[dict[str, Any]] = None
