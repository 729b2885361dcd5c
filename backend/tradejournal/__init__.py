"""
Trade journal metrics engine.

Turns an ordered list of journal trades and a starting balance into derived
per-trade records, summary statistics and time-bucketed equity series.
"""

from tradejournal.journal import (
    analyze,
    bucket_by_period,
    derive_sequence,
    derive_trade,
    summarize,
)
from tradejournal.metrics_core import (
    INFINITE,
    CompositeScoreWeights,
    EquityBucket,
    JournalReport,
    MetricsFacade,
    Period,
    SummaryStatistics,
    WeekStart,
)
from tradejournal.models import (
    DerivedTrade,
    Direction,
    ExitPriceFallback,
    RawTrade,
    TradeResult,
    TradeStatus,
)

__all__ = [
    "analyze",
    "bucket_by_period",
    "derive_sequence",
    "derive_trade",
    "summarize",
    "INFINITE",
    "CompositeScoreWeights",
    "EquityBucket",
    "JournalReport",
    "MetricsFacade",
    "Period",
    "SummaryStatistics",
    "WeekStart",
    "DerivedTrade",
    "Direction",
    "ExitPriceFallback",
    "RawTrade",
    "TradeResult",
    "TradeStatus",
]
