"""SQLAlchemy repository implementations."""

from stock_portfolios.repositories.sqlalchemy.database import (
    make_engine,
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from stock_portfolios.repositories.sqlalchemy.portfolio_repo import SqlAlchemyPortfolioRepository
from stock_portfolios.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository

__all__ = [
    "make_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyPortfolioRepository",
    "SqlAlchemyTransactionRepository",
]
