"""View models for service outputs."""

from stock_portfolios.domain.views.portfolio import (
    Quote,
    PricePoint,
    RateQuote,
    PositionBucket,
    CashEvent,
    CashReconciliation,
    AllocationItem,
    AllocationView,
    PositionSummary,
    SummaryView,
    BacktestEvent,
    BacktestTraceEntry,
    BacktestView,
)

__all__ = [
    "Quote",
    "PricePoint",
    "RateQuote",
    "PositionBucket",
    "CashEvent",
    "CashReconciliation",
    "AllocationItem",
    "AllocationView",
    "PositionSummary",
    "SummaryView",
    "BacktestEvent",
    "BacktestTraceEntry",
    "BacktestView",
]
