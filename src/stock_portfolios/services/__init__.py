"""Service layer - analytics engine and business logic orchestration."""

from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.ordering import cash_rank, chronological_key, order_transactions
from stock_portfolios.services.position_ledger import (
    PositionLedger,
    OPTION_SYMBOL_RE,
    contract_multiplier,
)
from stock_portfolios.services.cash_reconciler import CashReconciler
from stock_portfolios.services.drawdown import DrawdownTracker
from stock_portfolios.services.valuation_service import ValuationService, parse_allocation_basis
from stock_portfolios.services.backtest_service import BacktestService, build_events, parse_price_basis
from stock_portfolios.services.portfolio_service import PortfolioService
from stock_portfolios.services.ledger_service import LedgerService, TransactionInput, parse_trade_type
from stock_portfolios.services.analytics_service import AnalyticsService

__all__ = [
    "CurrencyNormalizer",
    "cash_rank",
    "chronological_key",
    "order_transactions",
    "PositionLedger",
    "OPTION_SYMBOL_RE",
    "contract_multiplier",
    "CashReconciler",
    "DrawdownTracker",
    "ValuationService",
    "parse_allocation_basis",
    "BacktestService",
    "build_events",
    "parse_price_basis",
    "PortfolioService",
    "LedgerService",
    "TransactionInput",
    "parse_trade_type",
    "AnalyticsService",
]
