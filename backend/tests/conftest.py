"""
Shared fixtures for trade journal tests.

sample_journal is a small, chronologically ordered journal whose derived
figures are worked out by hand in the tests:

    #  date        pair    dir    P&L      result     balance (start 10000)
    1  2025-09-01  EURUSD  Long   +100.00  Win        10100.00
    2  2025-09-02  GBPUSD  Short   -50.00  Loss       10050.00
    3  2025-09-02  EURUSD  Long   +150.00  Win        10200.00
    4  2025-09-08  USDJPY  Long   -100.00  Loss       10100.00
    5  2025-09-09  EURUSD  Long      0.00  BreakEven  10100.00  (pending)
"""

from datetime import date
from decimal import Decimal

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration made during a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_trade():
    """Factory for raw trade dicts with sensible defaults."""

    def _make_trade(**overrides):
        trade = {
            "date": "2025-09-01",
            "pair": "EURUSD",
            "direction": "Long",
            "entry_price": "100",
            "stop_price": "95",
            "target_price": "110",
            "exit_price": "110",
            "size": "10",
            "status": "Executed",
        }
        trade.update(overrides)
        return trade

    return _make_trade


@pytest.fixture
def sample_journal():
    """Five journal entries in the stored-record key style."""
    return [
        {
            "date": "2025-09-01",
            "pair": "EURUSD",
            "direction": "Long",
            "entry": "1.1000",
            "stop": "1.0950",
            "tp": "1.1100",
            "exit": "1.1100",
            "size": "10000",
            "status": "Executed",
        },
        {
            "date": "2025-09-02",
            "pair": "GBPUSD",
            "direction": "Short",
            "entry": "1.3000",
            "stop": "1.3050",
            "tp": "1.2900",
            "exit": "1.3050",
            "size": "10000",
            "status": "Executed",
        },
        {
            "date": "2025-09-02",
            "pair": "EURUSD",
            "direction": "Long",
            "entry": "1.1000",
            "stop": "1.0900",
            "tp": "1.1200",
            "exit": "1.1150",
            "size": "10000",
            "status": "Executed",
        },
        {
            "date": "2025-09-08",
            "pair": "USDJPY",
            "direction": "Long",
            "entry": "150",
            "stop": "149",
            "tp": "152",
            "exit": "149",
            "size": "100",
            "status": "Executed",
        },
        {
            "date": "2025-09-09",
            "pair": "EURUSD",
            "direction": "Long",
            "entry": "1.1000",
            "stop": "1.0900",
            "tp": "1.1200",
            "size": "10000",
            "status": "Pending",
        },
    ]


@pytest.fixture
def starting_balance():
    """Default journal starting balance."""
    return Decimal("10000")


@pytest.fixture
def today():
    """Fixed fallback date for undated trades."""
    return date(2025, 9, 10)
