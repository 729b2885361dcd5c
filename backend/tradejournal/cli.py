"""
CLI for producing trade journal reports.

This module provides the `tradejournal report` command, which reads a JSON
array of trade objects and prints summary statistics and equity buckets.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from decimal import Decimal, InvalidOperation

import click
import structlog

from tradejournal.config import settings
from tradejournal.metrics_core.base import is_infinite
from tradejournal.metrics_core.equity_analyzer import Period, WeekStart
from tradejournal.metrics_core.facade import JournalReport, MetricsFacade
from tradejournal.models.trade import ExitPriceFallback
from tradejournal.shared.validation_helpers import MAX_MAGNITUDE, strip_thousands_separators

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog for CLI use; events go to stderr."""
    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _parse_balance(ctx, param, value):
    if value is None:
        return None
    text = strip_thousands_separators(value.strip())
    if text is None:
        raise click.BadParameter(f"'{value}' is not a number")
    try:
        balance = Decimal(text)
    except InvalidOperation as e:
        raise click.BadParameter(f"'{value}' is not a number") from e
    if not balance.is_finite() or balance < 0 or balance >= MAX_MAGNITUDE:
        raise click.BadParameter("must be a finite, non-negative amount")
    return balance


def _load_trades(trades_file) -> list[dict]:
    try:
        payload = json.load(trades_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Could not parse {trades_file.name}: {e}") from e

    if isinstance(payload, dict) and isinstance(payload.get("trades"), list):
        payload = payload["trades"]
    if not isinstance(payload, list):
        raise click.ClickException("Expected a JSON array of trade objects")
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise click.ClickException(f"Trade at index {index} is not a JSON object")
    return payload


def _json_default(value):
    if isinstance(value, Decimal):
        return "Infinity" if is_infinite(value) else str(value)
    return str(value)


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, Decimal) and is_infinite(value):
        return "inf"
    return str(value)


def _report_to_dict(report: JournalReport) -> dict:
    return {
        "summary": dataclasses.asdict(report.summary),
        "buckets": [
            dataclasses.asdict(b) for b in sorted(report.buckets.values(), key=lambda b: b.period_key)
        ],
        "drawdown_periods": [dataclasses.asdict(p) for p in report.drawdown_periods],
        "top_pairs": [dataclasses.asdict(p) for p in report.top_pairs],
        "best_day": dataclasses.asdict(report.best_day) if report.best_day else None,
        "worst_day": dataclasses.asdict(report.worst_day) if report.worst_day else None,
        "consistency_score": report.consistency_score,
    }


def _echo_report(report: JournalReport, period: str) -> None:
    summary = report.summary
    streak = summary.current_streak

    click.echo(f"\n{'='*60}")
    click.echo("Trade Journal Summary")
    click.echo(f"{'='*60}")
    click.echo(f"Total Trades: {summary.total_trades}")
    click.echo(
        f"Wins / Losses / BreakEven: {summary.win_count} / {summary.loss_count} / "
        f"{summary.breakeven_count} (pending {summary.pending_count})"
    )
    click.echo(f"Win Rate: {summary.win_rate_percent}%")
    click.echo(f"Net P&L: {summary.net_profit_loss}")
    click.echo(f"Profit Factor: {_fmt(summary.profit_factor)}")
    click.echo(f"Expectancy: {summary.expectancy}")
    click.echo(f"Avg Win / Avg Loss: {_fmt(summary.average_win_loss_ratio)}")
    click.echo(f"Composite Score: {summary.composite_score}")
    click.echo(f"Average R:R: {summary.average_risk_reward}")
    click.echo(
        f"Average R: {_fmt(summary.average_r_multiple)} (cumulative {summary.cumulative_r}R)"
    )
    click.echo(
        f"Balance: {summary.starting_balance} -> {summary.ending_balance} "
        f"({summary.return_percent}%)"
    )
    click.echo(f"Max Drawdown: {summary.max_drawdown_percent}% ({summary.max_drawdown_amount})")
    click.echo(f"Current Streak: {streak.count} {_fmt(streak.result)}")
    click.echo(
        f"Longest Streaks: {summary.longest_win_streak} wins / "
        f"{summary.longest_loss_streak} losses"
    )
    click.echo(f"Consistency Score: {report.consistency_score}")

    click.echo(f"\nEquity by {period} period:")
    for bucket in sorted(report.buckets.values(), key=lambda b: b.period_key):
        click.echo(
            f"  {bucket.period_key}: {bucket.period_profit_loss} "
            f"({bucket.trade_count} trades, {bucket.win_count}W/{bucket.loss_count}L/"
            f"{bucket.breakeven_count}BE)"
        )

    if report.top_pairs:
        click.echo("\nTop Pairs:")
        for pair in report.top_pairs:
            click.echo(f"  {pair.pair}: {pair.profit_loss} ({pair.trade_count} trades)")

    click.echo(f"{'='*60}\n")


@click.group()
def cli():
    """Trade journal metrics CLI."""
    pass


@cli.command()
@click.argument("trades_file", metavar="TRADES_JSON", type=click.File("r", encoding="utf-8"))
@click.option(
    "--starting-balance",
    "-b",
    default=None,
    callback=_parse_balance,
    help="Account balance before the first trade (default: from settings)",
)
@click.option(
    "--period",
    default=Period.DAILY.value,
    type=click.Choice([p.value for p in Period]),
    help="Equity bucket granularity (default: daily)",
)
@click.option(
    "--exit-fallback",
    default=None,
    type=click.Choice([f.value for f in ExitPriceFallback]),
    help="Valuation of executed trades without an exit price (default: from settings)",
)
@click.option(
    "--week-start",
    default=None,
    type=click.Choice([w.value for w in WeekStart]),
    help="First day of weekly buckets (default: from settings)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: from settings)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def report(trades_file, starting_balance, period, exit_fallback, week_start, log_level, as_json):
    """
    Summarize a journal of trades.

    TRADES_JSON is a file (or - for stdin) holding a JSON array of trade
    objects, in chronological order.

    Example:
        tradejournal report trades.json --starting-balance 10000 --period weekly
    """
    configure_logging(log_level or settings.log_level, settings.log_json)

    trades = _load_trades(trades_file)
    balance = settings.default_starting_balance if starting_balance is None else starting_balance

    facade = MetricsFacade.from_settings(settings)
    journal = facade.analyze(
        trades,
        balance,
        period=Period(period),
        exit_fallback=ExitPriceFallback(exit_fallback) if exit_fallback else None,
        week_start=WeekStart(week_start) if week_start else None,
    )

    logger.info(
        "Report generated",
        source=trades_file.name,
        trade_count=journal.summary.total_trades,
        period=period,
    )

    if as_json:
        click.echo(json.dumps(_report_to_dict(journal), default=_json_default, indent=2))
    else:
        _echo_report(journal, period)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
