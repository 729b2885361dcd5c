"""
Functional entry points for the trade journal metrics engine.

Thin wrappers over the metrics_core calculators for callers that do not
need to hold calculator instances.

Example:
    from tradejournal import derive_sequence, summarize, bucket_by_period, Period

    trades = derive_sequence(raw_trades, starting_balance=Decimal("10000"))
    stats = summarize(trades, starting_balance=Decimal("10000"))
    monthly = bucket_by_period(trades, Period.MONTHLY)
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Optional

from tradejournal.metrics_core.equity_analyzer import (
    EquityAnalyzer,
    EquityBucket,
    Period,
    WeekStart,
)
from tradejournal.metrics_core.facade import JournalReport, MetricsFacade
from tradejournal.metrics_core.trade_derivation import TradeDeriver, TradeInput
from tradejournal.metrics_core.trade_statistics import (
    CompositeScoreWeights,
    SummaryStatistics,
    TradeStatisticsCalculator,
)
from tradejournal.models.trade import DerivedTrade, ExitPriceFallback


def derive_trade(
    raw: TradeInput,
    exit_fallback: ExitPriceFallback = ExitPriceFallback.NONE,
) -> DerivedTrade:
    """Derive R:R, P&L, result and R-multiple for one trade."""
    return TradeDeriver(exit_fallback).derive_trade(raw)


def derive_sequence(
    raws: Iterable[TradeInput],
    starting_balance: Any,
    exit_fallback: ExitPriceFallback = ExitPriceFallback.NONE,
) -> list[DerivedTrade]:
    """Derive every trade and fold P&L into running balances, in input order."""
    return TradeDeriver(exit_fallback).derive_sequence(raws, starting_balance)


def summarize(
    derived: Sequence[DerivedTrade],
    starting_balance: Any,
    weights: Optional[CompositeScoreWeights] = None,
    today: Optional[date] = None,
) -> SummaryStatistics:
    """Aggregate derived trades into SummaryStatistics."""
    return TradeStatisticsCalculator(weights).summarize(derived, starting_balance, today=today)


def bucket_by_period(
    derived: Sequence[DerivedTrade],
    period: Period,
    week_start: WeekStart = WeekStart.SUNDAY,
    today: Optional[date] = None,
) -> dict[str, EquityBucket]:
    """Group trade P&L into daily, weekly or monthly buckets."""
    return EquityAnalyzer().bucket_by_period(derived, period, week_start, today)


def analyze(
    raws: Iterable[TradeInput],
    starting_balance: Any,
    period: Period = Period.DAILY,
    exit_fallback: ExitPriceFallback = ExitPriceFallback.NONE,
    week_start: WeekStart = WeekStart.SUNDAY,
    today: Optional[date] = None,
) -> JournalReport:
    """Derive, summarize and bucket a journal in one call."""
    facade = MetricsFacade(exit_fallback=exit_fallback, week_start=week_start)
    return facade.analyze(raws, starting_balance, period=period, today=today)
