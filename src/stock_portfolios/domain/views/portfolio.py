"""View models for market data and analytics outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from stock_portfolios.domain.models.enums import CashEventKind


@dataclass
class Quote:
    """Latest market price for a symbol."""

    symbol: str
    price: float
    as_of: datetime


@dataclass
class PricePoint:
    """Historical price; date is the actual trading day the price belongs to."""

    symbol: str
    price: float
    date: date


@dataclass
class RateQuote:
    """Exchange rate: how many `to_ccy` per 1 `from_ccy`."""

    from_ccy: str
    to_ccy: str
    rate: float
    as_of: datetime


@dataclass
class PositionBucket:
    """Per-symbol holding under the average-cost model (scoped to one call)."""

    symbol: str
    shares: float = 0.0
    invested: float = 0.0  # cost basis of held shares, in reference currency
    currency: str = ""  # last seen transaction currency

    @property
    def average_cost(self) -> float:
        if self.shares <= 0:
            return 0.0
        return self.invested / self.shares


@dataclass
class CashEvent:
    """Deposit, withdrawal or inferred deposit (reference-currency magnitude)."""

    date: date
    amount: float


@dataclass
class CashReconciliation:
    """Output of replaying the ledger as a single running cash balance."""

    ref_currency: str
    deposits: float = 0.0
    withdrawals: float = 0.0
    inferred: float = 0.0
    ending_balance: float = 0.0
    min_balance: float = 0.0
    peak_contribution: float = 0.0
    deposit_events: list[CashEvent] = field(default_factory=list)
    withdrawal_events: list[CashEvent] = field(default_factory=list)
    inferred_events: list[CashEvent] = field(default_factory=list)

    @property
    def effective_cash_in(self) -> float:
        return self.deposits - self.withdrawals + self.inferred


@dataclass
class AllocationItem:
    """Single item in allocation breakdown."""

    symbol: str
    shares: float
    invested: float
    market_value: float = 0.0
    weight_percent: float = 0.0
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None


@dataclass
class AllocationView:
    """Portfolio allocation breakdown."""

    basis: str
    ref_currency: str
    items: list[AllocationItem] = field(default_factory=list)
    total_invested: float = 0.0
    total_market_value: float = 0.0
    as_of: Optional[datetime] = None


@dataclass
class PositionSummary:
    """Priced position with unrealized and daily P/L."""

    symbol: str
    shares: float
    invested: float
    price: float
    market_value: float
    unrealized_pl: float
    unrealized_pl_percent: float
    weight_percent_by_market_value: float = 0.0
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None


@dataclass
class SummaryView:
    """Portfolio summary: positions, totals and cash-adjusted P/L."""

    ref_currency: str
    as_of: Optional[datetime] = None
    total_invested: float = 0.0
    total_market_value: float = 0.0
    total_unrealized_pl: float = 0.0
    total_unrealized_pl_percent: float = 0.0
    cash_balance: float = 0.0
    deposits: float = 0.0
    withdrawals: float = 0.0
    inferred_deposits: float = 0.0
    effective_cash_in: float = 0.0
    peak_contribution: float = 0.0
    equity: float = 0.0
    cash_adjusted_pl: float = 0.0
    cash_adjusted_pl_percent: float = 0.0  # vs peak contribution
    cash_adjusted_pl_percent_current: float = 0.0  # vs effective cash in
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None
    positions: list[PositionSummary] = field(default_factory=list)


@dataclass
class BacktestEvent:
    """Cash-flow event replayed into the alternate instrument."""

    date: date
    kind: CashEventKind
    amount: float  # reference currency


@dataclass
class BacktestTraceEntry:
    """Debug record of one applied backtest event."""

    date: date
    kind: CashEventKind
    amount: float
    price: float
    price_date: date
    shares_delta: float
    running_shares: float
    running_equity: float


@dataclass
class BacktestView:
    """Result of replaying the cash-flow schedule into one alternate instrument."""

    symbol: str
    currency: str
    ref_currency: str
    price_basis: str
    as_of: Optional[datetime] = None
    current_price: float = 0.0
    multiplier: float = 1.0
    shares: float = 0.0
    alt_equity: float = 0.0
    effective_cash_in: float = 0.0
    peak_contribution: float = 0.0
    alt_pl: float = 0.0
    alt_pl_percent: float = 0.0
    alt_max_drawdown: float = 0.0
    actual_max_drawdown: Optional[float] = None
    day_by_day: bool = False
    event_count: int = 0
    skipped_days: int = 0
    trace: list[BacktestTraceEntry] = field(default_factory=list)
