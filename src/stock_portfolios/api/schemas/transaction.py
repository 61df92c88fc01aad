"""Pydantic schemas for transaction endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from stock_portfolios.domain.models import Transaction, TradeType
from stock_portfolios.services import TransactionInput


class TransactionRequest(BaseModel):
    """Request schema for creating or replacing a transaction."""

    trade_type: str = Field(default="", description="buy (or purchase), sell, dividend, cash")
    date: str = Field(default="", description="Trade date, YYYY/MM/DD")
    symbol: str = Field(default="", max_length=32, description="Instrument; empty for cash")
    currency: str = Field(default="", max_length=8, description="Transaction currency")
    shares: Decimal = Decimal("0")
    price: Decimal = Decimal("0")
    fee: Decimal = Decimal("0")
    total: Decimal = Field(
        default=Decimal("0"),
        description="Signed cash effect; for cash entries the sign marks deposit (+) or withdrawal (-)",
    )

    def to_input(self) -> TransactionInput:
        return TransactionInput(
            trade_type=self.trade_type,
            date=self.date,
            currency=self.currency,
            symbol=self.symbol,
            shares=self.shares,
            price=self.price,
            fee=self.fee,
            total=self.total,
        )


class TransactionResponse(BaseModel):
    """Response schema for a single transaction (amounts as JSON numbers)."""

    id: str
    portfolio_id: str
    symbol: str
    trade_type: TradeType
    currency: str
    shares: float
    price: float
    fee: float
    date: date
    total: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.txn_id,
            portfolio_id=txn.portfolio_id,
            symbol=txn.symbol,
            trade_type=txn.trade_type,
            currency=txn.currency,
            shares=float(txn.shares),
            price=float(txn.price),
            fee=float(txn.fee),
            date=txn.date,
            total=float(txn.total),
            created_at=txn.created_at,
            updated_at=txn.updated_at,
        )
