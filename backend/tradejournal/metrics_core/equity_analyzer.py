"""
Equity analyzer for the journal metrics engine.

Groups derived trades by calendar period for equity charts and calendar
views.

Analysis:
    - Daily / weekly / monthly P&L buckets (bucket_by_period)
    - Running-balance curve for drawdown calculation
    - Calendar-day summaries, best/worst day, consistency score
    - Weekly win/loss/breakeven tallies
    - Inclusive date-range filtering
    - Trade-order validation

Bucket keys are lexically sortable: ``YYYY-MM-DD`` for daily and weekly
buckets (weekly keys name the first day of the week) and ``YYYY-MM`` for
monthly buckets.

Trades without a usable date are placed on ``today`` (the current date
unless one is passed in) and the fallback is logged.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import structlog

from tradejournal.metrics_core.base import HUNDRED, ZERO, EquityPoint, round2
from tradejournal.models.trade import DerivedTrade, TradeResult

logger = structlog.get_logger(__name__)


class Period(StrEnum):
    """Equity bucket granularity."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class WeekStart(StrEnum):
    """First day of a weekly bucket."""

    SUNDAY = "sunday"
    MONDAY = "monday"


@dataclass
class EquityBucket:
    """P&L aggregated over one period.

    Attributes:
        period_key: Bucket label (YYYY-MM-DD or YYYY-MM)
        period_profit_loss: Sum of profit_loss for trades in the bucket
        trade_count: Number of trades in the bucket
        win_count: Winning trades in the bucket
        loss_count: Losing trades in the bucket
        breakeven_count: BreakEven (and pending) trades in the bucket
        closing_balance: Running balance after the bucket's last trade in input order
    """

    period_key: str
    period_profit_loss: Decimal = ZERO
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    breakeven_count: int = 0
    closing_balance: Optional[Decimal] = None


@dataclass
class DaySummary:
    """Calendar-day roll-up.

    Attributes:
        date_key: Day as YYYY-MM-DD
        profit_loss: Sum of the day's P&L
        trade_count: Trades on the day
        win_count: Winning trades on the day
        win_rate_percent: win_count / trade_count * 100 (2dp)
        average_risk_reward: Mean planned R:R of the day's trades (2dp)
    """

    date_key: str
    profit_loss: Decimal
    trade_count: int
    win_count: int
    win_rate_percent: Decimal
    average_risk_reward: Decimal


class EquityAnalyzer:
    """Analyzer for period-based views of derived trades.

    Example:
        analyzer = EquityAnalyzer()

        # Weekly equity chart
        buckets = analyzer.bucket_by_period(trades, Period.WEEKLY)
        chart = analyzer.sorted_buckets(buckets)

        # Calendar figures
        best, worst = analyzer.best_and_worst_day(trades)
    """

    def trade_day(self, trade: DerivedTrade, today: Optional[date] = None) -> date:
        """Return the trade's calendar day, or the fallback day when undated."""
        if trade.date is not None:
            return trade.date.date()
        return today or date.today()

    def period_key(
        self,
        day: date,
        period: Period,
        week_start: WeekStart = WeekStart.SUNDAY,
    ) -> str:
        """Return the bucket key for a day.

        Example:
            Wednesday 2025-09-03, weekly, Sunday start -> "2025-08-31"
            Wednesday 2025-09-03, weekly, Monday start -> "2025-09-01"
        """
        period = Period(period)
        if period == Period.DAILY:
            return day.isoformat()
        if period == Period.WEEKLY:
            if WeekStart(week_start) == WeekStart.MONDAY:
                offset = day.weekday()
            else:
                offset = (day.weekday() + 1) % 7
            return (day - timedelta(days=offset)).isoformat()
        return f"{day.year:04d}-{day.month:02d}"

    def bucket_by_period(
        self,
        trades: Sequence[DerivedTrade],
        period: Period,
        week_start: WeekStart = WeekStart.SUNDAY,
        today: Optional[date] = None,
    ) -> dict[str, EquityBucket]:
        """Group trade P&L into period buckets.

        Buckets appear in first-seen order of their keys. Use sorted_buckets
        for chart order.

        Args:
            trades: Derived trades
            period: DAILY, WEEKLY or MONTHLY
            week_start: First day of weekly buckets (default Sunday)
            today: Fallback day for undated trades (default: current date)

        Returns:
            Mapping of period_key to EquityBucket
        """
        fallback_day = today or date.today()
        self._log_undated(trades, fallback_day)

        buckets: dict[str, EquityBucket] = {}
        for trade in trades:
            key = self.period_key(self.trade_day(trade, fallback_day), period, week_start)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = EquityBucket(period_key=key)
            bucket.period_profit_loss += trade.profit_loss
            bucket.trade_count += 1
            bucket.closing_balance = trade.running_balance
            if trade.result == TradeResult.WIN:
                bucket.win_count += 1
            elif trade.result == TradeResult.LOSS:
                bucket.loss_count += 1
            else:
                bucket.breakeven_count += 1

        for bucket in buckets.values():
            bucket.period_profit_loss = round2(bucket.period_profit_loss)

        logger.debug(
            "Trades bucketed by period",
            period=Period(period).value,
            bucket_count=len(buckets),
            trade_count=len(trades),
        )
        return buckets

    def sorted_buckets(self, buckets: dict[str, EquityBucket]) -> list[EquityBucket]:
        """Return buckets in ascending key (chronological) order."""
        return [buckets[key] for key in sorted(buckets)]

    def build_balance_curve(
        self,
        trades: Sequence[DerivedTrade],
        starting_balance: Decimal,
        today: Optional[date] = None,
    ) -> list[EquityPoint]:
        """Build the running-balance curve for drawdown calculation.

        The first point is the starting balance, stamped with the first
        trade's time; each trade then contributes its running balance.

        Returns:
            List of EquityPoint, empty when there are no trades
        """
        if not trades:
            return []

        fallback = datetime.combine(today or date.today(), time())
        stamps = [trade.date or fallback for trade in trades]
        points = [EquityPoint(timestamp=stamps[0], value=starting_balance)]
        points.extend(
            EquityPoint(timestamp=stamp, value=trade.running_balance)
            for stamp, trade in zip(stamps, trades)
        )
        return points

    def summarize_days(
        self,
        trades: Sequence[DerivedTrade],
        today: Optional[date] = None,
    ) -> list[DaySummary]:
        """Roll trades up by calendar day, in first-seen order."""
        days: dict[str, list[DerivedTrade]] = {}
        for trade in trades:
            key = self.trade_day(trade, today).isoformat()
            days.setdefault(key, []).append(trade)

        summaries = []
        for key, day_trades in days.items():
            count = len(day_trades)
            wins = len([t for t in day_trades if t.result == TradeResult.WIN])
            summaries.append(
                DaySummary(
                    date_key=key,
                    profit_loss=round2(sum((t.profit_loss for t in day_trades), ZERO)),
                    trade_count=count,
                    win_count=wins,
                    win_rate_percent=round2(Decimal(wins) / Decimal(count) * HUNDRED),
                    average_risk_reward=round2(
                        sum((t.risk_reward_ratio for t in day_trades), ZERO) / Decimal(count)
                    ),
                )
            )
        return summaries

    def best_and_worst_day(
        self,
        trades: Sequence[DerivedTrade],
        today: Optional[date] = None,
    ) -> tuple[Optional[DaySummary], Optional[DaySummary]]:
        """Return the days with the highest and lowest P&L.

        Ties keep the earliest-seen day. Both are None when there are no trades.
        """
        days = self.summarize_days(trades, today)
        if not days:
            return None, None
        best = days[0]
        worst = days[0]
        for day in days[1:]:
            if day.profit_loss > best.profit_loss:
                best = day
            if day.profit_loss < worst.profit_loss:
                worst = day
        return best, worst

    def calculate_consistency_score(
        self,
        trades: Sequence[DerivedTrade],
        today: Optional[date] = None,
    ) -> Decimal:
        """Share of total profit earned on the single best day.

        consistency = highest winning day P&L / gross profit * 100

        Lower is more consistent. Returns 0 when there is no gross profit.

        Example:
            Days: +300, +100, -50 (gross profit 400) -> 300 / 400 * 100 = 75.00
        """
        gross_profit = sum((t.profit_loss for t in trades if t.profit_loss > 0), ZERO)
        if gross_profit <= 0:
            return round2(ZERO)
        best_day = max([d.profit_loss for d in self.summarize_days(trades, today)] + [ZERO])
        return round2(best_day / gross_profit * HUNDRED)

    def weekly_outcomes(
        self,
        trades: Sequence[DerivedTrade],
        week_start: WeekStart = WeekStart.SUNDAY,
        today: Optional[date] = None,
    ) -> list[EquityBucket]:
        """Win/loss/breakeven tallies per week, oldest week first."""
        buckets = self.bucket_by_period(trades, Period.WEEKLY, week_start, today)
        return self.sorted_buckets(buckets)

    def filter_by_date_range(
        self,
        trades: Sequence[DerivedTrade],
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
        starting_balance: Optional[Decimal] = None,
    ) -> list[DerivedTrade]:
        """Keep trades whose day falls within [start, end], preserving order.

        Either bound may be None for an open-ended range. Running balances
        are re-folded over the selected trades only, starting from
        starting_balance or, when it is None, from the balance just before
        the first selected trade. Summarizing the result from
        opening_balance() therefore counts only the selected trades.

        Example:
            Aug 1 +100, Sep 1 +50 from 10000, filtered from Sep 1:
            one trade, running_balance 10150, opening_balance 10100
        """
        selected = []
        for trade in trades:
            day = self.trade_day(trade, today)
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
            selected.append(trade)

        if not selected:
            return selected
        balance = self.opening_balance(selected) if starting_balance is None else starting_balance
        refolded = []
        for trade in selected:
            balance = balance + trade.profit_loss
            refolded.append(trade.model_copy(update={"running_balance": balance}))
        return refolded

    def opening_balance(self, trades: Sequence[DerivedTrade]) -> Optional[Decimal]:
        """Balance the running balances of trades were folded from.

        Returns:
            First running balance minus the first P&L, None for no trades
        """
        if not trades:
            return None
        return trades[0].running_balance - trades[0].profit_loss

    def validate_trade_order(self, trades: Sequence[DerivedTrade]) -> tuple[bool, list[str]]:
        """Check the trade sequence for ordering and balance problems.

        Checks for:
        - Undated trades
        - Non-chronological dates
        - Negative running balances

        Returns:
            Tuple of (is_valid, list of warning messages)
        """
        messages: list[str] = []

        previous: Optional[datetime] = None
        for i, trade in enumerate(trades):
            if trade.date is None:
                messages.append(f"Missing or unparseable date at index {i}")
                continue
            if previous is not None and trade.date < previous:
                messages.append(f"Non-chronological date at index {i}")
            previous = trade.date

        for i, trade in enumerate(trades):
            if trade.running_balance < 0:
                messages.append(f"Negative running balance at index {i}: {trade.running_balance}")

        is_valid = len(messages) == 0
        return is_valid, messages

    def _log_undated(self, trades: Sequence[DerivedTrade], fallback_day: date) -> None:
        undated = len([t for t in trades if t.date is None])
        if undated:
            logger.warning(
                "Undated trades placed on fallback date",
                undated_count=undated,
                fallback_date=fallback_day.isoformat(),
            )
