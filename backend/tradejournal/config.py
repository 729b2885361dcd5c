"""
Application configuration module using Pydantic Settings.

Centralized configuration for the trade journal metrics engine: logging,
the default starting balance, valuation and bucketing choices, and the
composite score weights.

Values are read from TRADEJOURNAL_-prefixed environment variables with
fallback to a .env file.
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tradejournal.metrics_core.equity_analyzer import WeekStart
from tradejournal.metrics_core.trade_statistics import CompositeScoreWeights
from tradejournal.models.trade import ExitPriceFallback


class Settings(BaseSettings):
    """
    Application settings with validation.

    Invalid values raise pydantic.ValidationError at construction.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRADEJOURNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum structlog level",
    )
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON instead of console text",
    )

    # Journal defaults
    default_starting_balance: Decimal = Field(
        default=Decimal("10000"),
        ge=0,
        description="Account balance before the first trade",
    )
    exit_price_fallback: ExitPriceFallback = Field(
        default=ExitPriceFallback.NONE,
        description="Valuation of executed trades without an exit price (none or target)",
    )
    week_start: WeekStart = Field(
        default=WeekStart.SUNDAY,
        description="First day of weekly equity buckets",
    )
    top_pairs_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of instruments in the top pairs breakdown",
    )

    # Composite score
    composite_win_rate_weight: Decimal = Field(default=Decimal("0.4"), ge=0)
    composite_win_loss_weight: Decimal = Field(default=Decimal("0.3"), ge=0)
    composite_profit_factor_weight: Decimal = Field(default=Decimal("0.3"), ge=0)
    composite_ratio_cap: Decimal = Field(
        default=Decimal("999.99"),
        gt=0,
        description="Cap applied to infinite ratios inside the composite score",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("exit_price_fallback", "week_start", mode="before")
    @classmethod
    def normalize_choice(cls, v: object) -> object:
        """Accept enum values in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def composite_weights(self) -> CompositeScoreWeights:
        """Composite score weights as configured."""
        return CompositeScoreWeights(
            win_rate=self.composite_win_rate_weight,
            win_loss_ratio=self.composite_win_loss_weight,
            profit_factor=self.composite_profit_factor_weight,
            ratio_cap=self.composite_ratio_cap,
        )


# Global settings instance
settings = Settings()
