"""
Trade Journal Data Models - Raw and Derived Trade Records

Purpose:
--------
Provides the Pydantic schemas for the trades a user logs in the journal and
for the enriched records the metrics engine produces from them.

Journal input is typed by hand and is often incomplete (a trade being edited,
a pending order without an exit), so RawTrade never rejects a record:
numeric fields coerce to zero, unknown enum text falls back to a default, and
unparseable dates become None. Every malformed, non-empty input is listed in
``coerced_fields`` so it can be surfaced for debugging.

Field names follow the journal's stored records, so both the snake_case names
and the stored-record keys (``entry``, ``stop``, ``tp``, ``exit``, ``entryPrice``...)
are accepted.
"""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from tradejournal.shared.validation_helpers import to_choice, to_datetime, to_decimal

logger = structlog.get_logger(__name__)

# =====================
# Enums
# =====================


class Direction(StrEnum):
    """Trade direction."""

    LONG = "Long"
    SHORT = "Short"


class TradeStatus(StrEnum):
    """Lifecycle stage of a logged trade."""

    PENDING = "Pending"
    EXECUTED = "Executed"


class TradeResult(StrEnum):
    """Outcome classification from the sign of realized P&L."""

    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "BreakEven"


class ExitPriceFallback(StrEnum):
    """How an executed trade without an exit price is valued.

    NONE: the trade is still open, P&L is 0.
    TARGET: value the trade as if it exited at its target ("what if" preview).
    """

    NONE = "none"
    TARGET = "target"


# =====================
# Input normalization
# =====================

_FIELD_ALIASES: dict[str, str] = {
    "trade_date": "date",
    "tradeDate": "date",
    "symbol": "pair",
    "side": "direction",
    "entryPrice": "entry_price",
    "entry": "entry_price",
    "stopPrice": "stop_price",
    "stop": "stop_price",
    "stop_loss": "stop_price",
    "targetPrice": "target_price",
    "target": "target_price",
    "tp": "target_price",
    "exitPrice": "exit_price",
    "exit": "exit_price",
    "quantity": "size",
}

_NUMERIC_FIELDS = ("entry_price", "stop_price", "target_price", "size")

_DIRECTION_WORDS = {
    "long": Direction.LONG,
    "buy": Direction.LONG,
    "short": Direction.SHORT,
    "sell": Direction.SHORT,
}

_STATUS_WORDS = {
    "pending": TradeStatus.PENDING,
    "executed": TradeStatus.EXECUTED,
}


# =====================
# Pydantic Schemas
# =====================


class RawTrade(BaseModel):
    """One user-entered trade, as logged in the journal.

    Attributes:
        date: When the trade was opened (None if missing or unparseable)
        pair: Instrument symbol, free text
        direction: Long or Short
        entry_price: Entry price (0 when missing)
        stop_price: Stop-loss price (0 when missing)
        target_price: Take-profit price (0 when missing)
        exit_price: Exit price, None while the trade is open or pending
        size: Position size in units or lots (0 when missing)
        notes: Free text
        status: Pending or Executed
        coerced_fields: Names of fields whose input was malformed and coerced
    """

    model_config = ConfigDict(frozen=True, extra="ignore", use_enum_values=False)

    date: Optional[datetime] = Field(default=None, description="Trade open date/time")
    pair: str = Field(default="", description="Instrument symbol")
    direction: Direction = Field(default=Direction.LONG, description="Trade direction")
    entry_price: Decimal = Field(default=Decimal("0"), description="Entry price")
    stop_price: Decimal = Field(default=Decimal("0"), description="Stop-loss price")
    target_price: Decimal = Field(default=Decimal("0"), description="Target price")
    exit_price: Optional[Decimal] = Field(default=None, description="Exit price")
    size: Decimal = Field(default=Decimal("0"), description="Position size")
    notes: str = Field(default="", description="Free text notes")
    status: TradeStatus = Field(default=TradeStatus.EXECUTED, description="Lifecycle stage")
    coerced_fields: tuple[str, ...] = Field(
        default=(), description="Fields whose malformed input was coerced"
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_input(cls, data: Any) -> Any:
        """Rename stored-record keys, coerce numerics, and enforce the pending invariant."""
        if not isinstance(data, dict):
            return data

        values: dict[str, Any] = {}
        for key, value in data.items():
            values[_FIELD_ALIASES.get(key, key)] = value

        coerced = list(values.get("coerced_fields") or ())

        for field_name in _NUMERIC_FIELDS:
            number, was_coerced = to_decimal(values.get(field_name))
            values[field_name] = number
            if was_coerced:
                coerced.append(field_name)

        raw_exit = values.get("exit_price")
        if raw_exit is None or (isinstance(raw_exit, str) and not raw_exit.strip()):
            values["exit_price"] = None
        else:
            number, was_coerced = to_decimal(raw_exit)
            values["exit_price"] = number
            if was_coerced:
                coerced.append("exit_price")

        parsed_date, was_coerced = to_datetime(values.get("date"))
        values["date"] = parsed_date
        if was_coerced:
            coerced.append("date")

        direction, was_coerced = to_choice(
            values.get("direction"), _DIRECTION_WORDS, Direction.LONG
        )
        values["direction"] = direction
        if was_coerced:
            coerced.append("direction")
            logger.warning(
                "Unrecognized trade direction, defaulting to Long",
                direction=str(data.get("direction", data.get("side"))),
            )

        status, was_coerced = to_choice(
            values.get("status"), _STATUS_WORDS, TradeStatus.EXECUTED
        )
        values["status"] = status
        if was_coerced:
            coerced.append("status")
            logger.warning(
                "Unrecognized trade status, defaulting to Executed",
                status=str(data.get("status")),
            )

        for text_field in ("pair", "notes"):
            text = values.get(text_field)
            values[text_field] = "" if text is None else str(text)

        if status == TradeStatus.PENDING and values["exit_price"] is not None:
            logger.warning(
                "Dropping exit price on pending trade",
                pair=values["pair"],
                exit_price=str(values["exit_price"]),
            )
            values["exit_price"] = None

        values["coerced_fields"] = tuple(dict.fromkeys(coerced))
        return values

    @property
    def is_pending(self) -> bool:
        """True while the trade has not been executed."""
        return self.status == TradeStatus.PENDING


class DerivedTrade(RawTrade):
    """RawTrade enriched with computed metrics.

    Attributes:
        risk_reward_ratio: Planned reward-to-risk, direction aware (2dp)
        profit_loss: Realized P&L in account currency (2dp, 0 when pending)
        result: Win / Loss / BreakEven from the sign of profit_loss
        r_multiple: Realized P&L in units of initial risk (None if undefined)
        running_balance: Starting balance plus cumulative P&L through this trade
    """

    risk_reward_ratio: Decimal = Field(default=Decimal("0"), description="Planned R:R")
    profit_loss: Decimal = Field(default=Decimal("0"), description="Realized P&L")
    result: TradeResult = Field(default=TradeResult.BREAKEVEN, description="Trade outcome")
    r_multiple: Optional[Decimal] = Field(default=None, description="Realized R-multiple")
    running_balance: Decimal = Field(default=Decimal("0"), description="Balance after trade")
