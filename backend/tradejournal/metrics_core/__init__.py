"""
Metrics core package for the trade journal.

Modular calculators behind the journal's dashboards and reports.

Modules:
    base: Numeric policy and foundation data models (EquityPoint, DrawdownPeriod, MetricResult)
    trade_derivation: Per-trade R:R, P&L, result and running balance
    trade_statistics: Summary statistics (win rate, profit factor, expectancy, composite score)
    streak_calculator: Current and longest win/loss streaks
    drawdown_calculator: O(n) drawdown algorithms over the running balance
    equity_analyzer: Period buckets, day summaries, date filtering
    facade: Unified MetricsFacade composing all calculators

Example:
    from tradejournal.metrics_core import MetricsFacade, Period

    # Using the facade (recommended)
    facade = MetricsFacade()
    report = facade.analyze(raw_trades, Decimal("10000"), period=Period.WEEKLY)

    # Using individual calculators
    deriver = TradeDeriver()
    trades = deriver.derive_sequence(raw_trades, Decimal("10000"))

    stats = TradeStatisticsCalculator().summarize(trades, Decimal("10000"))
"""

from tradejournal.metrics_core.base import (
    INFINITE,
    DrawdownPeriod,
    EquityPoint,
    MetricResult,
    is_infinite,
    round2,
    safe_ratio,
)
from tradejournal.metrics_core.drawdown_calculator import DrawdownCalculator
from tradejournal.metrics_core.equity_analyzer import (
    DaySummary,
    EquityAnalyzer,
    EquityBucket,
    Period,
    WeekStart,
)
from tradejournal.metrics_core.facade import JournalReport, MetricsFacade
from tradejournal.metrics_core.streak_calculator import StreakCalculator, StreakInfo
from tradejournal.metrics_core.trade_derivation import TradeDeriver
from tradejournal.metrics_core.trade_statistics import (
    CompositeScoreWeights,
    PairPerformance,
    SummaryStatistics,
    TradeStatisticsCalculator,
)

__all__ = [
    # Facade (recommended entry point)
    "MetricsFacade",
    "JournalReport",
    # Calculators
    "TradeDeriver",
    "TradeStatisticsCalculator",
    "StreakCalculator",
    "DrawdownCalculator",
    "EquityAnalyzer",
    # Data models
    "CompositeScoreWeights",
    "DaySummary",
    "DrawdownPeriod",
    "EquityBucket",
    "EquityPoint",
    "MetricResult",
    "PairPerformance",
    "Period",
    "StreakInfo",
    "SummaryStatistics",
    "WeekStart",
    # Numeric policy
    "INFINITE",
    "is_infinite",
    "round2",
    "safe_ratio",
]
