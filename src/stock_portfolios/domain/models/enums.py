"""Enumerations for domain models."""

from enum import Enum


class TradeType(str, Enum):
    """Kinds of ledger transactions."""

    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"
    CASH = "cash"  # sign of total: deposit (+) or withdrawal (-)


class AllocationBasis(str, Enum):
    """Denominator used to weight an allocation breakdown."""

    INVESTED = "invested"
    MARKET_VALUE = "market_value"


class PriceBasis(str, Enum):
    """Which daily price a historical lookup returns."""

    OPEN = "open"
    CLOSE = "close"


class CashEventKind(str, Enum):
    """Cash-flow events replayed by the backtest."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
