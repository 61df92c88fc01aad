"""Analytics orchestration: scope resolution and reference currency per call."""

from typing import Optional

from stock_portfolios.domain.models import Transaction
from stock_portfolios.domain.views import AllocationView, BacktestView, CashReconciliation, SummaryView
from stock_portfolios.providers.market_data_provider import RateProvider
from stock_portfolios.repositories.protocols import (
    ListFilter,
    PortfolioRepository,
    TransactionRepository,
)
from stock_portfolios.services.backtest_service import BacktestService
from stock_portfolios.services.cash_reconciler import CashReconciler
from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.valuation_service import ValuationService


class AnalyticsService:
    """
    Entry point for allocations, summary, cash and backtest.

    Every operation runs over one portfolio (portfolio_id given) or over the
    union of all portfolios, in the configured reference currency unless
    ref_currency overrides it.
    """

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        transaction_repo: TransactionRepository,
        valuation: ValuationService,
        backtest: BacktestService,
        rate_provider: Optional[RateProvider],
        ref_currency: str,
    ):
        self._portfolio_repo = portfolio_repo
        self._transaction_repo = transaction_repo
        self._valuation = valuation
        self._backtest = backtest
        self._rate_provider = rate_provider
        self._ref_currency = ref_currency

    def allocations(
        self,
        basis: Optional[str] = "invested",
        portfolio_id: Optional[str] = None,
        ref_currency: Optional[str] = None,
    ) -> AllocationView:
        return self._valuation.allocations(
            self._scope(portfolio_id), self._normalizer(ref_currency), basis
        )

    def summary(
        self,
        portfolio_id: Optional[str] = None,
        ref_currency: Optional[str] = None,
    ) -> SummaryView:
        return self._valuation.summary(self._scope(portfolio_id), self._normalizer(ref_currency))

    def cash(
        self,
        portfolio_id: Optional[str] = None,
        ref_currency: Optional[str] = None,
    ) -> CashReconciliation:
        return CashReconciler.fold(self._scope(portfolio_id), self._normalizer(ref_currency))

    def backtest(
        self,
        symbol: str,
        currency: Optional[str] = None,
        price_basis: Optional[str] = "close",
        debug: bool = False,
        portfolio_id: Optional[str] = None,
        ref_currency: Optional[str] = None,
    ) -> BacktestView:
        return self._backtest.run(
            self._scope(portfolio_id),
            symbol,
            self._normalizer(ref_currency),
            currency=currency,
            price_basis=price_basis,
            debug=debug,
        )

    def _normalizer(self, ref_currency: Optional[str]) -> CurrencyNormalizer:
        ref = (ref_currency or "").strip().upper() or self._ref_currency
        return CurrencyNormalizer(self._rate_provider, ref)

    def _scope(self, portfolio_id: Optional[str]) -> list[Transaction]:
        """Transactions of one portfolio (NotFoundError if missing) or of all."""
        if portfolio_id is not None:
            self._portfolio_repo.get_by_id(portfolio_id)
            return self._transaction_repo.list(portfolio_id, ListFilter())

        transactions: list[Transaction] = []
        for portfolio in self._portfolio_repo.list_all():
            transactions.extend(self._transaction_repo.list(portfolio.portfolio_id, ListFilter()))
        return transactions
