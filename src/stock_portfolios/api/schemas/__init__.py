"""Pydantic schemas for API request/response."""

from stock_portfolios.api.schemas.portfolio import (
    PortfolioRequest,
    PortfolioResponse,
)
from stock_portfolios.api.schemas.transaction import (
    TransactionRequest,
    TransactionResponse,
)
from stock_portfolios.api.schemas.analytics import (
    AllocationItemResponse,
    AllocationResponse,
    PositionSummaryResponse,
    SummaryResponse,
    CashEventResponse,
    CashResponse,
    BacktestTraceResponse,
    BacktestResponse,
)

__all__ = [
    "PortfolioRequest",
    "PortfolioResponse",
    "TransactionRequest",
    "TransactionResponse",
    "AllocationItemResponse",
    "AllocationResponse",
    "PositionSummaryResponse",
    "SummaryResponse",
    "CashEventResponse",
    "CashResponse",
    "BacktestTraceResponse",
    "BacktestResponse",
]
