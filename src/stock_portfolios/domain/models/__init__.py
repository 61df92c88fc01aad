"""Domain models package."""

from stock_portfolios.domain.models.enums import (
    TradeType,
    AllocationBasis,
    PriceBasis,
    CashEventKind,
)
from stock_portfolios.domain.models.portfolio import Portfolio
from stock_portfolios.domain.models.transaction import Transaction, to_decimal

__all__ = [
    "TradeType",
    "AllocationBasis",
    "PriceBasis",
    "CashEventKind",
    "Portfolio",
    "Transaction",
    "to_decimal",
]
