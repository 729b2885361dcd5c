"""
Unit tests for TradeStatisticsCalculator.

Tests:
- Win rate, profit factor, expectancy, average win/loss ratio
- INFINITE sentinel for loss-free journals
- Composite score and its configurable weights
- Full summary of the sample journal
- Empty journal and pending-trade exclusion
- Per-pair breakdown
"""

from decimal import Decimal

import pytest

from tradejournal.metrics_core.base import INFINITE, is_infinite
from tradejournal.metrics_core.streak_calculator import StreakInfo
from tradejournal.metrics_core.trade_derivation import TradeDeriver
from tradejournal.metrics_core.trade_statistics import (
    CompositeScoreWeights,
    TradeStatisticsCalculator,
)
from tradejournal.models.trade import TradeResult


@pytest.fixture
def calculator():
    """Fixture for TradeStatisticsCalculator."""
    return TradeStatisticsCalculator()


@pytest.fixture
def sample_trades(sample_journal, starting_balance):
    """Derived trades of the sample journal."""
    return TradeDeriver().derive_sequence(sample_journal, starting_balance)


class TestCalculateWinRate:
    """Test win rate calculation."""

    def test_zero_trades(self, calculator):
        """Test win rate with zero trades."""
        assert calculator.calculate_win_rate(0, 0) == Decimal("0")

    def test_fractional(self, calculator):
        """Test 1 of 3 rounds to 33.33."""
        assert calculator.calculate_win_rate(1, 3) == Decimal("33.33")

    def test_all_wins(self, calculator):
        """Test 100% win rate."""
        assert calculator.calculate_win_rate(10, 10) == Decimal("100.00")


class TestCalculateProfitFactor:
    """Test profit factor calculation."""

    def test_from_pnl(self, calculator):
        """Test $800 won / $300 lost."""
        assert calculator.calculate_profit_factor_from_pnl(
            Decimal("800"), Decimal("300")
        ) == Decimal("2.67")

    def test_no_losses_is_infinite(self, calculator, make_trade):
        """Test wins without losses give the INFINITE sentinel."""
        trades = TradeDeriver().derive_sequence([make_trade()], Decimal("1000"))

        result = calculator.calculate_profit_factor(trades)

        assert is_infinite(result)
        assert not result.is_nan()

    def test_no_trades_is_zero(self, calculator):
        """Test 0/0 is 0, not NaN."""
        assert calculator.calculate_profit_factor([]) == Decimal("0")

    def test_losses_only_is_zero(self, calculator, make_trade):
        """Test no gross profit gives 0."""
        trades = TradeDeriver().derive_sequence([make_trade(exit_price="95")], Decimal("1000"))

        assert calculator.calculate_profit_factor(trades) == Decimal("0")


class TestAverageWinLossRatio:
    """Test average win / average loss."""

    def test_sample(self, calculator, sample_trades):
        """Test 125 / 75."""
        assert calculator.calculate_average_win_loss_ratio(sample_trades) == Decimal("1.67")

    def test_wins_only_infinite(self, calculator, make_trade):
        """Test no losses gives INFINITE."""
        trades = TradeDeriver().derive_sequence([make_trade()], Decimal("1000"))

        assert calculator.calculate_average_win_loss_ratio(trades) == INFINITE

    def test_losses_only_zero(self, calculator, make_trade):
        """Test no wins means an average win of 0."""
        trades = TradeDeriver().derive_sequence([make_trade(exit_price="95")], Decimal("1000"))

        assert calculator.calculate_average_win_loss_ratio(trades) == Decimal("0")


class TestCompositeScore:
    """Test composite score blend."""

    def test_documented_example(self, calculator):
        """Test 50% / 2.0 / 2.0 gives 1.40."""
        assert calculator.calculate_composite_score(
            Decimal("50"), Decimal("2"), Decimal("2")
        ) == Decimal("1.40")

    def test_infinite_components_capped(self, calculator):
        """Test INFINITE ratios are capped so the score stays finite."""
        score = calculator.calculate_composite_score(Decimal("100"), INFINITE, INFINITE)

        assert score == Decimal("600.39")
        assert not is_infinite(score)

    def test_custom_weights(self, sample_trades, starting_balance):
        """Test weights come from CompositeScoreWeights."""
        weights = CompositeScoreWeights(
            win_rate=Decimal("1"), win_loss_ratio=Decimal("0"), profit_factor=Decimal("0")
        )
        calculator = TradeStatisticsCalculator(weights=weights)

        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.composite_score == Decimal("0.40")


class TestSummarize:
    """Test summary of the sample journal."""

    def test_counts(self, calculator, sample_trades, starting_balance):
        """Test counts and win rate."""
        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.total_trades == 5
        assert stats.win_count == 2
        assert stats.loss_count == 2
        assert stats.breakeven_count == 1
        assert stats.pending_count == 1
        assert stats.win_rate_percent == Decimal("40.00")

    def test_pnl_figures(self, calculator, sample_trades, starting_balance):
        """Test P&L based figures."""
        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.net_profit_loss == Decimal("100.00")
        assert stats.gross_profit == Decimal("250.00")
        assert stats.gross_loss == Decimal("150.00")
        assert stats.profit_factor == Decimal("1.67")
        assert stats.expectancy == Decimal("20.00")
        assert stats.average_win == Decimal("125.00")
        assert stats.average_loss == Decimal("75.00")
        assert stats.average_win_loss_ratio == Decimal("1.67")
        assert stats.composite_score == Decimal("1.16")

    def test_trade_figures(self, calculator, sample_trades, starting_balance):
        """Test best/worst trade and R figures."""
        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.best_trade == Decimal("150.00")
        assert stats.worst_trade == Decimal("-100.00")
        assert stats.average_risk_reward == Decimal("2.00")
        assert stats.average_r_multiple == Decimal("0.38")
        assert stats.cumulative_r == Decimal("1.50")

    def test_balance_figures(self, calculator, sample_trades, starting_balance):
        """Test balance, return and drawdown."""
        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.starting_balance == Decimal("10000")
        assert stats.ending_balance == Decimal("10100")
        assert stats.return_percent == Decimal("1.00")
        assert stats.max_drawdown_percent == Decimal("0.9804")
        assert stats.max_drawdown_amount == Decimal("100.00")

    def test_streaks(self, calculator, sample_trades, starting_balance):
        """Test streak figures."""
        stats = calculator.summarize(sample_trades, starting_balance)

        assert stats.current_streak == StreakInfo(TradeResult.LOSS, 1)
        assert stats.longest_win_streak == 1
        assert stats.longest_loss_streak == 1

    def test_empty_journal(self, calculator):
        """Test zero trades give all-zero figures and no NaN."""
        stats = calculator.summarize([], Decimal("10000"))

        assert stats.total_trades == 0
        assert stats.win_rate_percent == Decimal("0")
        assert stats.net_profit_loss == Decimal("0")
        assert stats.profit_factor == Decimal("0")
        assert stats.expectancy == Decimal("0")
        assert stats.average_win_loss_ratio == Decimal("0")
        assert stats.composite_score == Decimal("0")
        assert stats.ending_balance == Decimal("10000")
        assert stats.max_drawdown_percent == Decimal("0")
        assert stats.average_r_multiple is None
        assert stats.current_streak == StreakInfo(None, 0)

    def test_wins_only_infinite(self, calculator, make_trade):
        """Test a loss-free journal reports INFINITE ratios and a finite score."""
        trades = TradeDeriver().derive_sequence([make_trade(), make_trade()], Decimal("1000"))

        stats = calculator.summarize(trades, Decimal("1000"))

        assert stats.profit_factor == INFINITE
        assert stats.average_win_loss_ratio == INFINITE
        assert stats.composite_score == Decimal("600.39")

    def test_pending_only_in_total(self, calculator, sample_journal, make_trade, starting_balance):
        """Test adding a pending trade changes only total and breakeven counts."""
        deriver = TradeDeriver()
        base = calculator.summarize(
            deriver.derive_sequence(sample_journal, starting_balance), starting_balance
        )
        extended = calculator.summarize(
            deriver.derive_sequence(
                sample_journal + [make_trade(status="Pending", date="2025-09-10")],
                starting_balance,
            ),
            starting_balance,
        )

        assert extended.total_trades == base.total_trades + 1
        assert extended.pending_count == base.pending_count + 1
        assert extended.win_count == base.win_count
        assert extended.loss_count == base.loss_count
        assert extended.net_profit_loss == base.net_profit_loss
        assert extended.gross_profit == base.gross_profit
        assert extended.gross_loss == base.gross_loss
        assert extended.best_trade == base.best_trade
        assert extended.worst_trade == base.worst_trade

    def test_malformed_starting_balance(self, calculator):
        """Test a malformed balance is treated as zero."""
        assert calculator.summarize([], "n/a").starting_balance == Decimal("0")


class TestReturnPercent:
    """Test return on starting balance."""

    def test_positive(self, calculator):
        """Test 100 on 10000 is 1%."""
        assert calculator.calculate_return_percent(Decimal("100"), Decimal("10000")) == Decimal("1.00")

    def test_zero_balance(self, calculator):
        """Test no return on a zero balance."""
        assert calculator.calculate_return_percent(Decimal("100"), Decimal("0")) == Decimal("0")


class TestPairBreakdown:
    """Test per-pair performance."""

    def test_sorted_descending(self, calculator, sample_trades):
        """Test pairs sorted by total P&L."""
        breakdown = calculator.calculate_pair_breakdown(sample_trades)

        assert [p.pair for p in breakdown] == ["EURUSD", "GBPUSD", "USDJPY"]
        assert breakdown[0].profit_loss == Decimal("250.00")
        assert breakdown[0].trade_count == 3
        assert breakdown[0].average_profit_loss == Decimal("83.33")

    def test_top_n(self, calculator, sample_trades):
        """Test the breakdown is truncated."""
        assert len(calculator.calculate_pair_breakdown(sample_trades, top_n=2)) == 2

    def test_blank_pairs_skipped(self, calculator, make_trade):
        """Test trades without a pair are left out."""
        trades = TradeDeriver().derive_sequence([make_trade(pair="")], Decimal("1000"))

        assert calculator.calculate_pair_breakdown(trades) == []
