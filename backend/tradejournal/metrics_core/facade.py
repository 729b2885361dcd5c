"""
MetricsFacade for the trade journal.

Provides a unified facade that delegates to the modular calculators.

This facade composes:
    - TradeDeriver (per-trade R:R, P&L, result, running balance)
    - TradeStatisticsCalculator (summary statistics, pair breakdown)
    - DrawdownCalculator (drawdown periods)
    - EquityAnalyzer (period buckets, day summaries)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog

from tradejournal.metrics_core.base import DrawdownPeriod
from tradejournal.metrics_core.drawdown_calculator import DrawdownCalculator
from tradejournal.metrics_core.equity_analyzer import (
    DaySummary,
    EquityAnalyzer,
    EquityBucket,
    Period,
    WeekStart,
)
from tradejournal.metrics_core.trade_derivation import TradeDeriver, TradeInput
from tradejournal.metrics_core.trade_statistics import (
    CompositeScoreWeights,
    PairPerformance,
    SummaryStatistics,
    TradeStatisticsCalculator,
)
from tradejournal.models.trade import DerivedTrade, ExitPriceFallback

logger = structlog.get_logger(__name__)


@dataclass
class JournalReport:
    """Everything the journal views need from one pass over the trades.

    Attributes:
        trades: Derived trades in input order
        summary: Aggregate statistics
        buckets: Period buckets in first-seen order
        drawdown_periods: Drawdowns of the running balance, chronological
        top_pairs: Best-performing instruments
        best_day: Calendar day with the highest P&L (None if no trades)
        worst_day: Calendar day with the lowest P&L (None if no trades)
        consistency_score: Share of gross profit earned on the best day
    """

    trades: list[DerivedTrade]
    summary: SummaryStatistics
    buckets: dict[str, EquityBucket]
    drawdown_periods: list[DrawdownPeriod] = field(default_factory=list)
    top_pairs: list[PairPerformance] = field(default_factory=list)
    best_day: Optional[DaySummary] = None
    worst_day: Optional[DaySummary] = None
    consistency_score: Decimal = Decimal("0.00")


class MetricsFacade:
    """Unified facade for all journal metrics.

    Example:
        facade = MetricsFacade()
        report = facade.analyze(raw_trades, starting_balance=Decimal("10000"))
        report.summary.win_rate_percent
    """

    def __init__(
        self,
        exit_fallback: ExitPriceFallback = ExitPriceFallback.NONE,
        week_start: WeekStart = WeekStart.SUNDAY,
        weights: Optional[CompositeScoreWeights] = None,
        top_pairs_limit: int = 5,
    ):
        """Initialize the facade with its sub-calculators.

        Args:
            exit_fallback: Valuation of executed trades without an exit
            week_start: First day of weekly buckets
            weights: Composite score weights
            top_pairs_limit: Number of pairs kept in JournalReport.top_pairs
        """
        self.week_start = WeekStart(week_start)
        self.top_pairs_limit = top_pairs_limit
        self._deriver = TradeDeriver(exit_fallback=exit_fallback)
        self._trades = TradeStatisticsCalculator(weights=weights)
        self._drawdown = DrawdownCalculator()
        self._equity = EquityAnalyzer()

    @classmethod
    def from_settings(cls, settings: Any) -> "MetricsFacade":
        """Build a facade from a Settings instance."""
        return cls(
            exit_fallback=settings.exit_price_fallback,
            week_start=settings.week_start,
            weights=settings.composite_weights(),
            top_pairs_limit=settings.top_pairs_limit,
        )

    def analyze(
        self,
        raws: Iterable[TradeInput],
        starting_balance: Any,
        period: Period = Period.DAILY,
        exit_fallback: Optional[ExitPriceFallback] = None,
        week_start: Optional[WeekStart] = None,
        today: Optional[date] = None,
    ) -> JournalReport:
        """Derive, summarize and bucket a journal in one call.

        Args:
            raws: Raw trades in chronological order
            starting_balance: Account balance before the first trade
            period: Bucket granularity
            exit_fallback: Overrides the facade's exit fallback mode
            week_start: Overrides the facade's week start
            today: Fallback date for undated trades

        Returns:
            JournalReport
        """
        start = self._deriver.coerce_balance(starting_balance)
        trades = self._deriver.derive_sequence(raws, start, exit_fallback)
        summary = self._trades.summarize(trades, start, today=today)
        buckets = self._equity.bucket_by_period(
            trades, period, week_start or self.week_start, today
        )
        curve = self._equity.build_balance_curve(trades, start, today=today)
        best_day, worst_day = self._equity.best_and_worst_day(trades, today)

        report = JournalReport(
            trades=trades,
            summary=summary,
            buckets=buckets,
            drawdown_periods=self._drawdown.find_drawdown_periods(curve),
            top_pairs=self._trades.calculate_pair_breakdown(trades, self.top_pairs_limit),
            best_day=best_day,
            worst_day=worst_day,
            consistency_score=self._equity.calculate_consistency_score(trades, today),
        )

        logger.info(
            "Journal analyzed",
            trade_count=len(trades),
            period=Period(period).value,
            bucket_count=len(buckets),
        )
        return report

    # =========================================================================
    # Delegated methods for individual calculations
    # =========================================================================

    def derive_trade(
        self, raw: TradeInput, exit_fallback: Optional[ExitPriceFallback] = None
    ) -> DerivedTrade:
        """Delegate to TradeDeriver."""
        return self._deriver.derive_trade(raw, exit_fallback)

    def derive_sequence(
        self,
        raws: Iterable[TradeInput],
        starting_balance: Any,
        exit_fallback: Optional[ExitPriceFallback] = None,
    ) -> list[DerivedTrade]:
        """Delegate to TradeDeriver."""
        return self._deriver.derive_sequence(raws, starting_balance, exit_fallback)

    def summarize(
        self,
        trades: Sequence[DerivedTrade],
        starting_balance: Any,
        today: Optional[date] = None,
    ) -> SummaryStatistics:
        """Delegate to TradeStatisticsCalculator."""
        return self._trades.summarize(trades, starting_balance, today=today)

    def bucket_by_period(
        self,
        trades: Sequence[DerivedTrade],
        period: Period,
        week_start: Optional[WeekStart] = None,
        today: Optional[date] = None,
    ) -> dict[str, EquityBucket]:
        """Delegate to EquityAnalyzer."""
        return self._equity.bucket_by_period(trades, period, week_start or self.week_start, today)

    def weekly_outcomes(
        self, trades: Sequence[DerivedTrade], today: Optional[date] = None
    ) -> list[EquityBucket]:
        """Delegate to EquityAnalyzer."""
        return self._equity.weekly_outcomes(trades, self.week_start, today)

    def filter_by_date_range(
        self,
        trades: Sequence[DerivedTrade],
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
        starting_balance: Optional[Decimal] = None,
    ) -> list[DerivedTrade]:
        """Delegate to EquityAnalyzer."""
        return self._equity.filter_by_date_range(trades, start, end, today, starting_balance)

    def summarize_range(
        self,
        trades: Sequence[DerivedTrade],
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> SummaryStatistics:
        """Summarize only the trades dated within [start, end].

        The window starts from the balance held before its first trade, so
        net P&L equals the sum of the window's trade P&L.
        """
        window = self._equity.filter_by_date_range(trades, start, end, today)
        opening = self._equity.opening_balance(window)
        if opening is None:
            opening = self._equity.opening_balance(trades) or Decimal("0")
        return self._trades.summarize(window, opening, today=today)
