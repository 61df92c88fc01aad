"""In-memory repository implementations."""

from stock_portfolios.repositories.memory.memory_repo import (
    MemoryStore,
    MemoryPortfolioRepository,
    MemoryTransactionRepository,
)

__all__ = [
    "MemoryStore",
    "MemoryPortfolioRepository",
    "MemoryTransactionRepository",
]
