"""
Drawdown calculator over the journal's running-balance curve.

Provides single-pass algorithms for:
- Maximum drawdown (percentage and currency amount)
- Drawdown period identification
- Top-N drawdowns by depth

The balance curve starts with the starting balance, followed by the running
balance after each trade, so a loss on the very first trade is a drawdown.
"""

import heapq
from collections.abc import Sequence
from decimal import Decimal

import structlog

from tradejournal.metrics_core.base import (
    FOUR_PLACES,
    HUNDRED,
    ZERO,
    DrawdownPeriod,
    EquityPoint,
    MetricResult,
    quantize_places,
    round2,
)

logger = structlog.get_logger(__name__)


class DrawdownCalculator:
    """Calculate drawdown metrics using O(n) algorithms.

    Stateless calculator - all methods are pure functions.

    Example:
        calculator = DrawdownCalculator()
        curve = [EquityPoint(ts0, Decimal("10000")), EquityPoint(ts1, Decimal("9500")), ...]
        max_dd = calculator.calculate_max_drawdown(curve)
        periods = calculator.find_drawdown_periods(curve)
    """

    __slots__ = ()

    def calculate_max_drawdown(self, balance_curve: Sequence[EquityPoint]) -> MetricResult:
        """Calculate maximum drawdown in a single pass.

        Tracks the running peak and measures the fall from it at each point.
        A non-positive peak has no meaningful percentage drawdown and is skipped.

        Args:
            balance_curve: Balance points in trade order

        Returns:
            MetricResult with max drawdown as percentage (0-100, 4dp) and
            metadata peak_value, trough_value, drawdown_amount (2dp)
        """
        if not balance_curve:
            return MetricResult(
                name="max_drawdown",
                value=ZERO,
                metadata={"peak_value": ZERO, "trough_value": ZERO, "drawdown_amount": round2(ZERO)},
            )

        peak = balance_curve[0].value
        max_dd = ZERO
        max_dd_peak = peak
        max_dd_trough = peak

        for point in balance_curve:
            if point.value > peak:
                peak = point.value
            elif peak > 0:
                dd = (peak - point.value) / peak * HUNDRED
                if dd > max_dd:
                    max_dd = dd
                    max_dd_peak = peak
                    max_dd_trough = point.value

        return MetricResult(
            name="max_drawdown",
            value=quantize_places(max_dd, FOUR_PLACES),
            metadata={
                "peak_value": max_dd_peak,
                "trough_value": max_dd_trough,
                "drawdown_amount": round2(max_dd_peak - max_dd_trough),
            },
        )

    def find_drawdown_periods(
        self,
        balance_curve: Sequence[EquityPoint],
        min_drawdown_pct: Decimal = ZERO,
    ) -> list[DrawdownPeriod]:
        """Find all drawdown periods in a single pass.

        State transitions: PEAK -> DRAWDOWN -> RECOVERY. A period closes when
        the balance returns to or above its peak; an unrecovered period at the
        end of the curve is reported with recovery_date None.

        Args:
            balance_curve: Balance points in trade order
            min_drawdown_pct: Minimum drawdown percentage to include (default 0)

        Returns:
            List of DrawdownPeriod objects in chronological order
        """
        if len(balance_curve) < 2:
            return []

        periods: list[DrawdownPeriod] = []
        peak_value = balance_curve[0].value
        peak_date = balance_curve[0].timestamp
        trough_value = peak_value
        trough_date = peak_date
        in_drawdown = False

        for point in balance_curve[1:]:
            if point.value >= peak_value:
                if in_drawdown:
                    period = self._build_period(
                        peak_date, peak_value, trough_date, trough_value, point.timestamp
                    )
                    if period is not None and period.drawdown_pct >= min_drawdown_pct:
                        periods.append(period)
                peak_value = point.value
                peak_date = point.timestamp
                trough_value = point.value
                trough_date = point.timestamp
                in_drawdown = False
            else:
                in_drawdown = True
                if point.value < trough_value:
                    trough_value = point.value
                    trough_date = point.timestamp

        if in_drawdown:
            period = self._build_period(peak_date, peak_value, trough_date, trough_value, None)
            if period is not None and period.drawdown_pct >= min_drawdown_pct:
                periods.append(period)

        logger.debug("Drawdown periods found", period_count=len(periods))
        return periods

    def get_top_drawdowns(
        self,
        balance_curve: Sequence[EquityPoint],
        top_n: int = 5,
    ) -> list[DrawdownPeriod]:
        """Get the top N drawdown periods by depth, largest first.

        Uses heapq.nlargest, O(n log k) for k = top_n.
        """
        periods = self.find_drawdown_periods(balance_curve)
        return heapq.nlargest(top_n, periods, key=lambda p: p.drawdown_pct)

    @staticmethod
    def _build_period(peak_date, peak_value, trough_date, trough_value, recovery_date):
        if peak_value <= 0 or trough_value >= peak_value:
            return None
        dd_pct = (peak_value - trough_value) / peak_value * HUNDRED
        return DrawdownPeriod(
            peak_date=peak_date,
            trough_date=trough_date,
            recovery_date=recovery_date,
            peak_value=peak_value,
            trough_value=trough_value,
            drawdown_pct=quantize_places(dd_pct, FOUR_PLACES),
            duration_days=(trough_date - peak_date).days,
            recovery_days=(recovery_date - trough_date).days if recovery_date else None,
        )
