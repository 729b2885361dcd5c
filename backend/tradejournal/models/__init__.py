"""
Data models for the trade journal.
"""

from tradejournal.models.trade import (
    DerivedTrade,
    Direction,
    ExitPriceFallback,
    RawTrade,
    TradeResult,
    TradeStatus,
)

__all__ = [
    "DerivedTrade",
    "Direction",
    "ExitPriceFallback",
    "RawTrade",
    "TradeResult",
    "TradeStatus",
]
