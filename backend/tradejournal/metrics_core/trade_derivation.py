"""
Trade derivation for the journal metrics engine.

Turns user-entered RawTrade records into DerivedTrade records:

Calculations:
    - Risk:reward (planned reward / planned risk, direction aware)
    - Realized profit/loss (0 for pending or open trades)
    - Result classification (Win / Loss / BreakEven)
    - Realized R-multiple (price move / initial risk)
    - Running balance (left fold over the caller's order)

Ordering is a caller contract: trades are folded exactly in the order given
and are never re-sorted.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional, Union

import structlog

from tradejournal.metrics_core.base import ZERO, round2
from tradejournal.models.trade import (
    DerivedTrade,
    Direction,
    ExitPriceFallback,
    RawTrade,
    TradeResult,
)
from tradejournal.shared.validation_helpers import to_decimal

logger = structlog.get_logger(__name__)

TradeInput = Union[RawTrade, Mapping[str, Any]]


class TradeDeriver:
    """Derive per-trade metrics and running balances.

    Stateless apart from the default exit-price fallback mode; every method
    is a pure function of its arguments.

    Example:
        deriver = TradeDeriver()
        trade = deriver.derive_trade({"direction": "Long", "entry": "100", ...})
        trades = deriver.derive_sequence(raw_trades, starting_balance=Decimal("10000"))
    """

    __slots__ = ("exit_fallback",)

    def __init__(self, exit_fallback: ExitPriceFallback = ExitPriceFallback.NONE):
        """
        Args:
            exit_fallback: Default valuation for executed trades without an exit
        """
        self.exit_fallback = ExitPriceFallback(exit_fallback)

    def derive_trade(
        self,
        raw: TradeInput,
        exit_fallback: Optional[ExitPriceFallback] = None,
    ) -> DerivedTrade:
        """Derive R:R, P&L, result and R-multiple for a single trade.

        The returned running_balance is the trade's own P&L (a balance
        starting from zero); derive_sequence sets the real value.

        Args:
            raw: RawTrade or a mapping of journal fields
            exit_fallback: Overrides the deriver's default fallback mode

        Returns:
            DerivedTrade with computed fields
        """
        trade = self._to_raw_trade(raw)
        mode = self.exit_fallback if exit_fallback is None else ExitPriceFallback(exit_fallback)

        if trade.coerced_fields:
            logger.debug(
                "Malformed trade fields coerced to defaults",
                pair=trade.pair,
                fields=list(trade.coerced_fields),
            )

        risk_reward = self.calculate_risk_reward(trade)
        profit_loss = self.calculate_profit_loss(trade, mode)
        r_multiple = self.calculate_r_multiple(trade, mode)

        derived = DerivedTrade.model_validate(
            {
                **trade.model_dump(),
                "risk_reward_ratio": risk_reward,
                "profit_loss": profit_loss,
                "result": self.classify_result(profit_loss),
                "r_multiple": r_multiple,
                "running_balance": profit_loss,
            }
        )

        logger.debug(
            "Trade derived",
            pair=trade.pair,
            direction=trade.direction.value,
            status=trade.status.value,
            risk_reward=str(risk_reward),
            profit_loss=str(profit_loss),
            result=derived.result.value,
        )
        return derived

    def derive_sequence(
        self,
        raws: Iterable[TradeInput],
        starting_balance: Any,
        exit_fallback: Optional[ExitPriceFallback] = None,
    ) -> list[DerivedTrade]:
        """Derive every trade and fold P&L into running balances.

        running_balance[i] = running_balance[i-1] + profit_loss[i], with
        running_balance[-1] = starting_balance. Processing is strictly
        sequential in the order given.

        Args:
            raws: Trades in chronological order (caller's responsibility)
            starting_balance: Account balance before the first trade
            exit_fallback: Overrides the deriver's default fallback mode

        Returns:
            List of DerivedTrade in input order
        """
        balance = self.coerce_balance(starting_balance)
        derived: list[DerivedTrade] = []
        previous_date = None

        for index, raw in enumerate(raws):
            trade = self.derive_trade(raw, exit_fallback)
            balance = balance + trade.profit_loss
            derived.append(trade.model_copy(update={"running_balance": balance}))

            if trade.date is not None:
                if previous_date is not None and trade.date < previous_date:
                    logger.warning(
                        "Trades are not in chronological order",
                        index=index,
                        trade_date=trade.date.isoformat(),
                        previous_date=previous_date.isoformat(),
                    )
                previous_date = trade.date

        logger.info(
            "Trade sequence derived",
            trade_count=len(derived),
            ending_balance=str(balance),
        )
        return derived

    def calculate_risk_reward(self, trade: RawTrade) -> Decimal:
        """Calculate planned risk:reward.

        Long:  (target - entry) / (entry - stop)
        Short: (entry - target) / (stop - entry)

        Returns:
            R:R rounded to 2 places, 0 if entry, stop or target is missing
            or entry == stop

        Example:
            Long entry 100, stop 95, target 110 -> 10 / 5 = 2.00
        """
        entry, stop, target = trade.entry_price, trade.stop_price, trade.target_price
        if entry == 0 or stop == 0 or target == 0 or entry == stop:
            return round2(ZERO)

        if trade.direction == Direction.LONG:
            ratio = (target - entry) / (entry - stop)
        else:
            ratio = (entry - target) / (stop - entry)
        return round2(ratio)

    def resolve_exit_price(
        self, trade: RawTrade, exit_fallback: ExitPriceFallback
    ) -> Optional[Decimal]:
        """Return the exit used for valuation, or None if the trade is open.

        Pending trades never have an exit. A missing or zero exit falls back
        to the target only in TARGET mode.
        """
        if trade.is_pending:
            return None
        exit_price = trade.exit_price
        if not exit_price and exit_fallback == ExitPriceFallback.TARGET:
            exit_price = trade.target_price
        if not exit_price:
            return None
        return exit_price

    def calculate_profit_loss(self, trade: RawTrade, exit_fallback: ExitPriceFallback) -> Decimal:
        """Calculate realized P&L.

        Long:  (exit - entry) * size
        Short: (entry - exit) * size

        Returns:
            P&L rounded to 2 places; 0 for pending trades and for trades
            without an exit or entry price
        """
        exit_price = self.resolve_exit_price(trade, exit_fallback)
        if exit_price is None or trade.entry_price == 0:
            return round2(ZERO)

        if trade.direction == Direction.LONG:
            profit_loss = (exit_price - trade.entry_price) * trade.size
        else:
            profit_loss = (trade.entry_price - exit_price) * trade.size
        return round2(profit_loss)

    def calculate_r_multiple(
        self, trade: RawTrade, exit_fallback: ExitPriceFallback
    ) -> Optional[Decimal]:
        """Calculate the realized R-multiple.

        R = favourable price move / abs(entry - stop)

        Returns:
            R-multiple rounded to 2 places, None when the trade has no
            realized P&L basis or no defined initial risk

        Example:
            Long entry 100, stop 95, exit 110 -> 10 / 5 = 2.00R
        """
        exit_price = self.resolve_exit_price(trade, exit_fallback)
        if exit_price is None or trade.entry_price == 0 or trade.size == 0:
            return None
        if trade.stop_price == 0 or trade.stop_price == trade.entry_price:
            return None

        risk = abs(trade.entry_price - trade.stop_price)
        if trade.direction == Direction.LONG:
            move = exit_price - trade.entry_price
        else:
            move = trade.entry_price - exit_price
        return round2(move / risk)

    @staticmethod
    def classify_result(profit_loss: Decimal) -> TradeResult:
        """Win if P&L > 0, Loss if < 0, BreakEven otherwise."""
        if profit_loss > 0:
            return TradeResult.WIN
        if profit_loss < 0:
            return TradeResult.LOSS
        return TradeResult.BREAKEVEN

    @staticmethod
    def coerce_balance(starting_balance: Any) -> Decimal:
        """Coerce a starting balance to Decimal, logging malformed input."""
        balance, was_coerced = to_decimal(starting_balance)
        if was_coerced:
            logger.warning(
                "Malformed starting balance coerced to zero",
                starting_balance=str(starting_balance),
            )
        return balance

    @staticmethod
    def _to_raw_trade(raw: TradeInput) -> RawTrade:
        if isinstance(raw, RawTrade):
            return raw
        return RawTrade.model_validate(dict(raw))
