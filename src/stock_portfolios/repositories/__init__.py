"""Repository layer - data access abstractions and implementations."""

from stock_portfolios.repositories.protocols import (
    PortfolioRepository,
    TransactionRepository,
    ListFilter,
)

__all__ = [
    "PortfolioRepository",
    "TransactionRepository",
    "ListFilter",
]
