"""In-memory repository implementations."""

import threading
from typing import Optional

from stock_portfolios.core.exceptions import NotFoundError
from stock_portfolios.domain.models import Portfolio, Transaction
from stock_portfolios.repositories.protocols.transaction_repo import (
    ListFilter,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
)


class MemoryStore:
    """Shared state for the in-memory repositories."""

    def __init__(self):
        self.lock = threading.RLock()
        self.portfolios: dict[str, Portfolio] = {}
        # portfolio_id -> txn_id -> transaction, in insertion order
        self.transactions: dict[str, dict[str, Transaction]] = {}


class MemoryPortfolioRepository:
    """Dict-backed portfolio repository."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def create(self, portfolio: Portfolio) -> Portfolio:
        with self._store.lock:
            self._store.portfolios[portfolio.portfolio_id] = portfolio
            self._store.transactions.setdefault(portfolio.portfolio_id, {})
        return portfolio

    def get_by_id(self, portfolio_id: str) -> Portfolio:
        with self._store.lock:
            portfolio = self._store.portfolios.get(portfolio_id)
        if portfolio is None:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def list_all(self) -> list[Portfolio]:
        with self._store.lock:
            return list(self._store.portfolios.values())

    def update(self, portfolio: Portfolio) -> Portfolio:
        with self._store.lock:
            if portfolio.portfolio_id not in self._store.portfolios:
                raise NotFoundError("Portfolio", portfolio.portfolio_id)
            self._store.portfolios[portfolio.portfolio_id] = portfolio
        return portfolio

    def delete(self, portfolio_id: str) -> None:
        with self._store.lock:
            if portfolio_id not in self._store.portfolios:
                raise NotFoundError("Portfolio", portfolio_id)
            del self._store.portfolios[portfolio_id]
            self._store.transactions.pop(portfolio_id, None)


class MemoryTransactionRepository:
    """Dict-backed transaction repository."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _pool(self, portfolio_id: str) -> dict[str, Transaction]:
        if portfolio_id not in self._store.portfolios:
            raise NotFoundError("Portfolio", portfolio_id)
        return self._store.transactions.setdefault(portfolio_id, {})

    def create(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        with self._store.lock:
            self._pool(portfolio_id)[transaction.txn_id] = transaction
        return transaction

    def create_batch(self, portfolio_id: str, transactions: list[Transaction]) -> list[Transaction]:
        with self._store.lock:
            pool = self._pool(portfolio_id)
            for txn in transactions:
                pool[txn.txn_id] = txn
        return list(transactions)

    def get_by_id(self, portfolio_id: str, txn_id: str) -> Transaction:
        with self._store.lock:
            txn = self._pool(portfolio_id).get(txn_id)
        if txn is None:
            raise NotFoundError("Transaction", txn_id)
        return txn

    def list(self, portfolio_id: str, filter: Optional[ListFilter] = None) -> list[Transaction]:
        filter = filter or ListFilter()
        with self._store.lock:
            out = list(self._pool(portfolio_id).values())

        if filter.symbol:
            wanted = filter.symbol.lower()
            out = [t for t in out if t.symbol.lower() == wanted]

        if filter.sort == SORT_DATE_ASC:
            out.sort(key=lambda t: t.date)
        elif filter.sort == SORT_DATE_DESC:
            out.sort(key=lambda t: t.date, reverse=True)

        start = max(filter.offset, 0)
        if start >= len(out):
            return []
        end = start + filter.limit if filter.limit > 0 else len(out)
        return out[start:end]

    def update(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        with self._store.lock:
            pool = self._pool(portfolio_id)
            if transaction.txn_id not in pool:
                raise NotFoundError("Transaction", transaction.txn_id)
            pool[transaction.txn_id] = transaction
        return transaction

    def delete(self, portfolio_id: str, txn_id: str) -> None:
        with self._store.lock:
            pool = self._pool(portfolio_id)
            if txn_id not in pool:
                raise NotFoundError("Transaction", txn_id)
            del pool[txn_id]
