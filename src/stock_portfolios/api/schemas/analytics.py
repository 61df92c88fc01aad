"""Pydantic schemas for analytics endpoints."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from stock_portfolios.domain.models import CashEventKind

_FROM_ATTRS = {"from_attributes": True}


class AllocationItemResponse(BaseModel):
    """Single item in an allocation breakdown."""

    model_config = _FROM_ATTRS

    symbol: str
    shares: float
    invested: float
    market_value: float
    weight_percent: float
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None


class AllocationResponse(BaseModel):
    """Allocation breakdown by invested capital or market value."""

    model_config = _FROM_ATTRS

    basis: str
    ref_currency: str
    total_invested: float
    total_market_value: float
    as_of: Optional[datetime] = None
    items: list[AllocationItemResponse]


class PositionSummaryResponse(BaseModel):
    """Priced position inside a summary."""

    model_config = _FROM_ATTRS

    symbol: str
    shares: float
    invested: float
    price: float
    market_value: float
    unrealized_pl: float
    unrealized_pl_percent: float
    weight_percent_by_market_value: float
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None


class SummaryResponse(BaseModel):
    """Totals, cash-adjusted P/L and positions."""

    model_config = _FROM_ATTRS

    ref_currency: str
    as_of: Optional[datetime] = None
    total_invested: float
    total_market_value: float
    total_unrealized_pl: float
    total_unrealized_pl_percent: float
    cash_balance: float
    deposits: float
    withdrawals: float
    inferred_deposits: float
    effective_cash_in: float
    peak_contribution: float
    equity: float
    cash_adjusted_pl: float
    cash_adjusted_pl_percent: float
    cash_adjusted_pl_percent_current: float
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None
    positions: list[PositionSummaryResponse]


class CashEventResponse(BaseModel):
    model_config = _FROM_ATTRS

    date: date
    amount: float


class CashResponse(BaseModel):
    """Reconstructed cash balance with explicit and inferred flows."""

    model_config = _FROM_ATTRS

    ref_currency: str
    deposits: float
    withdrawals: float
    inferred: float
    ending_balance: float
    min_balance: float
    effective_cash_in: float
    peak_contribution: float
    deposit_events: list[CashEventResponse]
    withdrawal_events: list[CashEventResponse]
    inferred_events: list[CashEventResponse]


class BacktestTraceResponse(BaseModel):
    model_config = _FROM_ATTRS

    date: date
    kind: CashEventKind
    amount: float
    price: float
    price_date: date
    shares_delta: float
    running_shares: float
    running_equity: float


class BacktestResponse(BaseModel):
    """Alternate-instrument backtest result."""

    model_config = _FROM_ATTRS

    symbol: str
    currency: str
    ref_currency: str
    price_basis: str
    as_of: Optional[datetime] = None
    current_price: float
    multiplier: float
    shares: float
    alt_equity: float
    effective_cash_in: float
    peak_contribution: float
    alt_pl: float
    alt_pl_percent: float
    alt_max_drawdown: float
    actual_max_drawdown: Optional[float] = None
    day_by_day: bool
    event_count: int
    skipped_days: int
    trace: list[BacktestTraceResponse] = []
