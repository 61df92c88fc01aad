"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Numeric,
    ForeignKey,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from stock_portfolios.repositories.sqlalchemy.database import Base
from stock_portfolios.domain.models.enums import TradeType


class PortfolioORM(Base):
    """SQLAlchemy model for Portfolio."""

    __tablename__ = "portfolios"

    portfolio_id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    base_ccy = Column(String(8), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    transactions = relationship(
        "TransactionORM",
        back_populates="portfolio",
        cascade="all, delete-orphan",
    )


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "transactions"

    txn_id = Column(String(64), primary_key=True)
    portfolio_id = Column(
        String(64), ForeignKey("portfolios.portfolio_id"), nullable=False, index=True
    )
    trade_type = Column(SqlEnum(TradeType), nullable=False)
    date = Column(Date, nullable=False)
    symbol = Column(String(32), nullable=False, default="")
    currency = Column(String(8), nullable=False)
    shares = Column(Numeric(precision=18, scale=8), nullable=False, default=Decimal("0"))
    price = Column(Numeric(precision=18, scale=8), nullable=False, default=Decimal("0"))
    fee = Column(Numeric(precision=18, scale=2), nullable=False, default=Decimal("0"))
    total = Column(Numeric(precision=18, scale=2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    portfolio = relationship("PortfolioORM", back_populates="transactions")
