"""Domain layer - pure business models with no external dependencies."""

from stock_portfolios.domain.models import (
    Portfolio,
    Transaction,
    TradeType,
    AllocationBasis,
    PriceBasis,
    CashEventKind,
)

__all__ = [
    "Portfolio",
    "Transaction",
    "TradeType",
    "AllocationBasis",
    "PriceBasis",
    "CashEventKind",
]
