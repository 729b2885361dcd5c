"""
Trade statistics calculator for the journal metrics engine.

Aggregates a sequence of DerivedTrade records into SummaryStatistics.

Calculations:
    - Trade counts (winning, losing, breakeven, pending)
    - Win rate percentage (winning trades / total trades * 100)
    - Profit factor (gross profit / gross loss)
    - Expectancy (net P&L per trade)
    - Average win / average loss ratio
    - Composite score (weighted blend of win rate, win/loss ratio, profit factor)
    - Best/worst trade, average R:R, average and cumulative R-multiple
    - Max drawdown over the running balance, win/loss streaks
    - Per-pair P&L breakdown

Zero-division policy:
    Ratios return 0 when numerator and denominator are both zero and the
    INFINITE sentinel when only the denominator is zero. Nothing here raises
    or returns NaN.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog

from tradejournal.metrics_core.base import (
    HUNDRED,
    ZERO,
    round2,
    safe_ratio,
)
from tradejournal.metrics_core.drawdown_calculator import DrawdownCalculator
from tradejournal.metrics_core.equity_analyzer import EquityAnalyzer
from tradejournal.metrics_core.streak_calculator import StreakCalculator, StreakInfo
from tradejournal.models.trade import DerivedTrade, TradeResult
from tradejournal.shared.validation_helpers import to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CompositeScoreWeights:
    """Weights for the composite quality score.

    score = win_rate_fraction * win_rate
          + min(average_win_loss_ratio, ratio_cap) * win_loss_ratio
          + min(profit_factor, ratio_cap) * profit_factor

    The win rate enters as a fraction (0-1). Ratios are capped so an
    INFINITE component still yields a finite score.
    """

    win_rate: Decimal = Decimal("0.4")
    win_loss_ratio: Decimal = Decimal("0.3")
    profit_factor: Decimal = Decimal("0.3")
    ratio_cap: Decimal = Decimal("999.99")


@dataclass
class SummaryStatistics:
    """Aggregated journal statistics.

    Attributes:
        total_trades: All trades, pending and breakeven included
        win_count: Trades with profit_loss > 0
        loss_count: Trades with profit_loss < 0
        breakeven_count: Trades with profit_loss == 0 (pending included)
        pending_count: Trades not yet executed
        win_rate_percent: win_count / total_trades * 100 (2dp)
        net_profit_loss: Final running balance - starting balance
        gross_profit: Sum of winning P&L
        gross_loss: Absolute sum of losing P&L
        profit_factor: gross_profit / gross_loss, INFINITE when no losses
        expectancy: net_profit_loss / total_trades (2dp)
        average_win: Mean winning P&L (0 if no wins)
        average_loss: Absolute mean losing P&L (0 if no losses)
        average_win_loss_ratio: average_win / average_loss, INFINITE when no losses
        composite_score: Weighted quality heuristic (see CompositeScoreWeights)
        best_trade: Largest executed-trade P&L (0 if none)
        worst_trade: Smallest executed-trade P&L (0 if none)
        average_risk_reward: Mean planned R:R
        average_r_multiple: Mean realized R, None if no trade has one
        cumulative_r: Sum of realized R-multiples
        starting_balance: Balance before the first trade
        ending_balance: Running balance after the last trade
        return_percent: net_profit_loss / starting_balance * 100 (2dp)
        max_drawdown_percent: Deepest fall from a balance peak (0-100)
        max_drawdown_amount: Currency size of that fall
        current_streak: Run ending at the latest decisive trade
        longest_win_streak: Longest run of consecutive wins
        longest_loss_streak: Longest run of consecutive losses
    """

    total_trades: int
    win_count: int
    loss_count: int
    breakeven_count: int
    pending_count: int
    win_rate_percent: Decimal
    net_profit_loss: Decimal
    gross_profit: Decimal
    gross_loss: Decimal
    profit_factor: Decimal
    expectancy: Decimal
    average_win: Decimal
    average_loss: Decimal
    average_win_loss_ratio: Decimal
    composite_score: Decimal
    best_trade: Decimal
    worst_trade: Decimal
    average_risk_reward: Decimal
    average_r_multiple: Optional[Decimal]
    cumulative_r: Decimal
    starting_balance: Decimal
    ending_balance: Decimal
    return_percent: Decimal
    max_drawdown_percent: Decimal
    max_drawdown_amount: Decimal
    current_streak: StreakInfo = field(default_factory=lambda: StreakInfo(None, 0))
    longest_win_streak: int = 0
    longest_loss_streak: int = 0


@dataclass
class PairPerformance:
    """P&L contribution of one instrument.

    Attributes:
        pair: Instrument symbol
        profit_loss: Total P&L across the pair's trades
        trade_count: Number of trades on the pair
        average_profit_loss: profit_loss / trade_count (2dp)
    """

    pair: str
    profit_loss: Decimal
    trade_count: int
    average_profit_loss: Decimal


class TradeStatisticsCalculator:
    """Calculator for journal summary statistics.

    Composes DrawdownCalculator, StreakCalculator and EquityAnalyzer for the
    balance-curve and streak figures.

    Example:
        calculator = TradeStatisticsCalculator()

        # Calculate individual metrics
        win_rate = calculator.calculate_win_rate(winning_trades=6, total_trades=10)
        profit_factor = calculator.calculate_profit_factor(trades)

        # Calculate everything at once
        stats = calculator.summarize(trades, starting_balance=Decimal("10000"))
    """

    def __init__(self, weights: Optional[CompositeScoreWeights] = None):
        """
        Args:
            weights: Composite score weights (default 0.4 / 0.3 / 0.3, cap 999.99)
        """
        self.weights = weights or CompositeScoreWeights()
        self._drawdown = DrawdownCalculator()
        self._streaks = StreakCalculator()
        self._equity = EquityAnalyzer()

    def summarize(
        self,
        trades: Sequence[DerivedTrade],
        starting_balance: Any,
        today: Optional[date] = None,
    ) -> SummaryStatistics:
        """Calculate summary statistics over derived trades.

        Args:
            trades: Derived trades in the order they were folded
            starting_balance: Balance the running balances started from
            today: Fallback date for undated trades on the balance curve

        Returns:
            SummaryStatistics; all-zero figures for an empty sequence
        """
        start, was_coerced = to_decimal(starting_balance)
        if was_coerced:
            logger.warning(
                "Malformed starting balance coerced to zero",
                starting_balance=str(starting_balance),
            )

        total_trades = len(trades)
        wins = [t.profit_loss for t in trades if t.result == TradeResult.WIN]
        losses = [t.profit_loss for t in trades if t.result == TradeResult.LOSS]
        pending_count = len([t for t in trades if t.is_pending])
        executed = [t.profit_loss for t in trades if not t.is_pending]

        gross_profit = round2(sum(wins, ZERO))
        gross_loss = round2(abs(sum(losses, ZERO)))
        ending_balance = trades[-1].running_balance if trades else start
        net_profit_loss = round2(ending_balance - start) if trades else round2(ZERO)

        win_rate_percent = self.calculate_win_rate(len(wins), total_trades)
        profit_factor = self.calculate_profit_factor_from_pnl(gross_profit, gross_loss)
        average_win = self._mean(wins)
        average_loss = abs(self._mean(losses))
        average_win_loss_ratio = round2(safe_ratio(average_win, average_loss))

        r_values = [t.r_multiple for t in trades if t.r_multiple is not None]
        balance_curve = self._equity.build_balance_curve(trades, start, today=today)
        max_drawdown = self._drawdown.calculate_max_drawdown(balance_curve)
        longest_win, longest_loss = self._streaks.longest_streaks(trades)

        stats = SummaryStatistics(
            total_trades=total_trades,
            win_count=len(wins),
            loss_count=len(losses),
            breakeven_count=total_trades - len(wins) - len(losses),
            pending_count=pending_count,
            win_rate_percent=win_rate_percent,
            net_profit_loss=net_profit_loss,
            gross_profit=gross_profit,
            gross_loss=gross_loss,
            profit_factor=profit_factor,
            expectancy=self.calculate_expectancy(net_profit_loss, total_trades),
            average_win=round2(average_win),
            average_loss=round2(average_loss),
            average_win_loss_ratio=average_win_loss_ratio,
            composite_score=self.calculate_composite_score(
                win_rate_percent, average_win_loss_ratio, profit_factor
            ),
            best_trade=round2(max(executed)) if executed else round2(ZERO),
            worst_trade=round2(min(executed)) if executed else round2(ZERO),
            average_risk_reward=round2(self._mean([t.risk_reward_ratio for t in trades])),
            average_r_multiple=round2(self._mean(r_values)) if r_values else None,
            cumulative_r=round2(sum(r_values, ZERO)),
            starting_balance=start,
            ending_balance=ending_balance,
            return_percent=self.calculate_return_percent(net_profit_loss, start),
            max_drawdown_percent=max_drawdown.value,
            max_drawdown_amount=max_drawdown.metadata["drawdown_amount"],
            current_streak=self._streaks.current_streak(trades),
            longest_win_streak=longest_win,
            longest_loss_streak=longest_loss,
        )

        logger.info(
            "Summary statistics calculated",
            total_trades=total_trades,
            win_count=stats.win_count,
            loss_count=stats.loss_count,
            net_profit_loss=str(net_profit_loss),
            profit_factor=str(profit_factor),
        )
        return stats

    def calculate_win_rate(self, winning_trades: int, total_trades: int) -> Decimal:
        """Calculate win rate as a percentage.

        Returns:
            winning_trades / total_trades * 100 rounded to 2 places, 0 when
            there are no trades

        Example:
            1 win out of 3 trades = 33.33
        """
        if total_trades == 0:
            return round2(ZERO)
        return round2(Decimal(winning_trades) / Decimal(total_trades) * HUNDRED)

    def calculate_profit_factor(self, trades: Sequence[DerivedTrade]) -> Decimal:
        """Calculate profit factor from trades.

        Profit factor = sum(winning P&L) / abs(sum(losing P&L))

        Example:
            Total wins: $800, total losses: $300 -> 2.67
        """
        gross_profit = sum((t.profit_loss for t in trades if t.profit_loss > 0), ZERO)
        gross_loss = abs(sum((t.profit_loss for t in trades if t.profit_loss < 0), ZERO))
        return self.calculate_profit_factor_from_pnl(gross_profit, gross_loss)

    def calculate_profit_factor_from_pnl(
        self, gross_profit: Decimal, gross_loss: Decimal
    ) -> Decimal:
        """Calculate profit factor from pre-computed P&L values.

        Returns INFINITE when there are wins but no losses and 0 when there
        are neither.
        """
        return round2(safe_ratio(gross_profit, gross_loss))

    def calculate_expectancy(self, net_profit_loss: Decimal, total_trades: int) -> Decimal:
        """Calculate expectancy as net P&L per trade (2dp, 0 when no trades)."""
        if total_trades == 0:
            return round2(ZERO)
        return round2(net_profit_loss / Decimal(total_trades))

    def calculate_average_win_loss_ratio(self, trades: Sequence[DerivedTrade]) -> Decimal:
        """Calculate average win / abs(average loss).

        The average win is 0 when there are no winning trades, so a
        losses-only journal scores 0 and a wins-only journal scores INFINITE.
        """
        average_win = self._mean([t.profit_loss for t in trades if t.result == TradeResult.WIN])
        average_loss = abs(
            self._mean([t.profit_loss for t in trades if t.result == TradeResult.LOSS])
        )
        return round2(safe_ratio(average_win, average_loss))

    def calculate_composite_score(
        self,
        win_rate_percent: Decimal,
        average_win_loss_ratio: Decimal,
        profit_factor: Decimal,
    ) -> Decimal:
        """Blend win rate, win/loss ratio and profit factor into one figure.

        This is a heuristic quality indicator, not a statistical measure.

        Args:
            win_rate_percent: Win rate on the 0-100 scale
            average_win_loss_ratio: Average win / average loss (may be INFINITE)
            profit_factor: Profit factor (may be INFINITE)

        Returns:
            Composite score rounded to 2 places, always finite

        Example:
            50% win rate, ratio 2.0, profit factor 2.0
            -> 0.5 * 0.4 + 2.0 * 0.3 + 2.0 * 0.3 = 1.40
        """
        weights = self.weights
        win_rate_fraction = win_rate_percent / HUNDRED
        score = (
            win_rate_fraction * weights.win_rate
            + min(average_win_loss_ratio, weights.ratio_cap) * weights.win_loss_ratio
            + min(profit_factor, weights.ratio_cap) * weights.profit_factor
        )
        return round2(score)

    def calculate_return_percent(self, net_profit_loss: Decimal, starting_balance: Decimal) -> Decimal:
        """Return on the starting balance as a percentage (0 if balance <= 0)."""
        if starting_balance <= 0:
            return round2(ZERO)
        return round2(net_profit_loss / starting_balance * HUNDRED)

    def calculate_pair_breakdown(
        self,
        trades: Sequence[DerivedTrade],
        top_n: Optional[int] = 5,
    ) -> list[PairPerformance]:
        """Group P&L by instrument, best performers first.

        Trades without a pair are skipped.

        Args:
            trades: Derived trades
            top_n: Maximum number of pairs to return (None for all)

        Returns:
            List of PairPerformance sorted by profit_loss descending
        """
        totals: dict[str, list] = {}
        for trade in trades:
            if not trade.pair:
                continue
            bucket = totals.setdefault(trade.pair, [ZERO, 0])
            bucket[0] += trade.profit_loss
            bucket[1] += 1

        breakdown = [
            PairPerformance(
                pair=pair,
                profit_loss=round2(profit_loss),
                trade_count=count,
                average_profit_loss=round2(profit_loss / Decimal(count)),
            )
            for pair, (profit_loss, count) in totals.items()
        ]
        breakdown.sort(key=lambda p: p.profit_loss, reverse=True)
        return breakdown if top_n is None else breakdown[:top_n]

    @staticmethod
    def _mean(values: Sequence[Decimal]) -> Decimal:
        if not values:
            return ZERO
        return sum(values, ZERO) / Decimal(len(values))
