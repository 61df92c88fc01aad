"""SQLAlchemy implementation of TransactionRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from stock_portfolios.core.exceptions import NotFoundError
from stock_portfolios.domain.models import Transaction
from stock_portfolios.repositories.protocols.transaction_repo import (
    ListFilter,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
)
from stock_portfolios.repositories.sqlalchemy.orm_models import PortfolioORM, TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        self._ensure_portfolio(portfolio_id)
        orm_txn = self._to_orm(portfolio_id, transaction)
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    def create_batch(self, portfolio_id: str, transactions: list[Transaction]) -> list[Transaction]:
        """Persist several transactions in one commit."""
        self._ensure_portfolio(portfolio_id)
        orm_txns = [self._to_orm(portfolio_id, t) for t in transactions]
        self._db.add_all(orm_txns)
        self._db.commit()
        for orm_txn in orm_txns:
            self._db.refresh(orm_txn)
        return [self._to_domain(t) for t in orm_txns]

    def get_by_id(self, portfolio_id: str, txn_id: str) -> Transaction:
        """Retrieve transaction by ID."""
        return self._to_domain(self._get_orm(portfolio_id, txn_id))

    def list(self, portfolio_id: str, filter: Optional[ListFilter] = None) -> list[Transaction]:
        """List transactions for a portfolio with optional symbol filter, sort and paging."""
        filter = filter or ListFilter()
        self._ensure_portfolio(portfolio_id)

        query = self._db.query(TransactionORM).filter(
            TransactionORM.portfolio_id == portfolio_id
        )
        if filter.symbol:
            query = query.filter(func.lower(TransactionORM.symbol) == filter.symbol.lower())

        if filter.sort == SORT_DATE_ASC:
            query = query.order_by(TransactionORM.date, TransactionORM.created_at)
        elif filter.sort == SORT_DATE_DESC:
            query = query.order_by(TransactionORM.date.desc(), TransactionORM.created_at)
        else:
            query = query.order_by(TransactionORM.created_at, TransactionORM.txn_id)

        if filter.offset > 0:
            query = query.offset(filter.offset)
        if filter.limit > 0:
            query = query.limit(filter.limit)
        return [self._to_domain(t) for t in query.all()]

    def update(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        """Replace an existing transaction."""
        orm_txn = self._get_orm(portfolio_id, transaction.txn_id)

        orm_txn.trade_type = transaction.trade_type
        orm_txn.date = transaction.date
        orm_txn.symbol = transaction.symbol
        orm_txn.currency = transaction.currency
        orm_txn.shares = transaction.shares
        orm_txn.price = transaction.price
        orm_txn.fee = transaction.fee
        orm_txn.total = transaction.total
        orm_txn.updated_at = transaction.updated_at or datetime.utcnow()

        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    def delete(self, portfolio_id: str, txn_id: str) -> None:
        """Delete a transaction."""
        orm_txn = self._get_orm(portfolio_id, txn_id)
        self._db.delete(orm_txn)
        self._db.commit()

    def _ensure_portfolio(self, portfolio_id: str) -> None:
        exists = self._db.query(PortfolioORM.portfolio_id).filter(
            PortfolioORM.portfolio_id == portfolio_id
        ).first()
        if exists is None:
            raise NotFoundError("Portfolio", portfolio_id)

    def _get_orm(self, portfolio_id: str, txn_id: str) -> TransactionORM:
        self._ensure_portfolio(portfolio_id)
        orm_txn = self._db.query(TransactionORM).filter(
            TransactionORM.portfolio_id == portfolio_id,
            TransactionORM.txn_id == txn_id,
        ).first()
        if orm_txn is None:
            raise NotFoundError("Transaction", txn_id)
        return orm_txn

    @staticmethod
    def _to_orm(portfolio_id: str, txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=txn.txn_id,
            portfolio_id=portfolio_id,
            trade_type=txn.trade_type,
            date=txn.date,
            symbol=txn.symbol,
            currency=txn.currency,
            shares=txn.shares,
            price=txn.price,
            fee=txn.fee,
            total=txn.total,
            created_at=txn.created_at or datetime.utcnow(),
            updated_at=txn.updated_at,
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            portfolio_id=orm.portfolio_id,
            trade_type=orm.trade_type,
            date=orm.date,
            currency=orm.currency,
            total=orm.total,
            symbol=orm.symbol or "",
            shares=orm.shares,
            price=orm.price,
            fee=orm.fee,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
