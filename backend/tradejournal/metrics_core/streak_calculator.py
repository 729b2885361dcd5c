"""
Win/loss streak calculator for the journal metrics engine.

Streaks count consecutive trades with the same result. BreakEven trades
(including pending trades, whose P&L is 0) are skipped: they neither extend
nor break a streak.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from tradejournal.models.trade import DerivedTrade, TradeResult


@dataclass
class StreakInfo:
    """A run of consecutive same-result trades.

    Attributes:
        result: WIN or LOSS, None when no trade has a non-zero P&L
        count: Number of trades in the run
    """

    result: Optional[TradeResult]
    count: int


class StreakCalculator:
    """Calculate current and longest win/loss streaks.

    Example:
        calculator = StreakCalculator()
        current = calculator.current_streak(trades)   # StreakInfo(WIN, 3)
        longest_win, longest_loss = calculator.longest_streaks(trades)
    """

    __slots__ = ()

    def current_streak(self, trades: Sequence[DerivedTrade]) -> StreakInfo:
        """Return the streak that ends at the most recent decisive trade.

        Walks backwards from the last trade, skipping BreakEven trades.

        Args:
            trades: Derived trades in chronological order

        Returns:
            StreakInfo; StreakInfo(None, 0) when there are no wins or losses
        """
        streak = StreakInfo(result=None, count=0)
        for trade in reversed(trades):
            if trade.result == TradeResult.BREAKEVEN:
                continue
            if streak.result is None:
                streak = StreakInfo(result=trade.result, count=1)
            elif trade.result == streak.result:
                streak.count += 1
            else:
                break
        return streak

    def longest_streaks(self, trades: Sequence[DerivedTrade]) -> tuple[int, int]:
        """Return the longest consecutive win and loss runs.

        Args:
            trades: Derived trades in chronological order

        Returns:
            Tuple of (longest_win_streak, longest_loss_streak)
        """
        longest = {TradeResult.WIN: 0, TradeResult.LOSS: 0}
        run_result: Optional[TradeResult] = None
        run_length = 0

        for trade in trades:
            if trade.result == TradeResult.BREAKEVEN:
                continue
            if trade.result == run_result:
                run_length += 1
            else:
                run_result = trade.result
                run_length = 1
            if run_length > longest[run_result]:
                longest[run_result] = run_length

        return longest[TradeResult.WIN], longest[TradeResult.LOSS]
