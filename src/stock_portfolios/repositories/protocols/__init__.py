"""Repository protocol definitions (interfaces)."""

from stock_portfolios.repositories.protocols.portfolio_repo import PortfolioRepository
from stock_portfolios.repositories.protocols.transaction_repo import (
    TransactionRepository,
    ListFilter,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
    SORT_OPTIONS,
)

__all__ = [
    "PortfolioRepository",
    "TransactionRepository",
    "ListFilter",
    "SORT_DATE_ASC",
    "SORT_DATE_DESC",
    "SORT_OPTIONS",
]
