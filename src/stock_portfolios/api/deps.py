"""Dependency injection for FastAPI."""

import logging
from functools import lru_cache
from typing import Generator, Optional, Union

from fastapi import Depends
from sqlalchemy.orm import Session

from stock_portfolios.config.settings import get_settings
from stock_portfolios.core.timezone import today_local
from stock_portfolios.providers import (
    AlphaVantageProvider,
    StubMarketDataProvider,
    YahooMarketDataProvider,
    history_capability,
)
from stock_portfolios.repositories.memory import (
    MemoryStore,
    MemoryPortfolioRepository,
    MemoryTransactionRepository,
)
from stock_portfolios.repositories.sqlalchemy import (
    SqlAlchemyPortfolioRepository,
    SqlAlchemyTransactionRepository,
)
from stock_portfolios.repositories.sqlalchemy.database import get_db
from stock_portfolios.services import (
    AnalyticsService,
    BacktestService,
    LedgerService,
    PortfolioService,
    ValuationService,
)

logger = logging.getLogger(__name__)

ALPHAVANTAGE_ALIASES = ("alphavantage", "alpha", "av")

MarketDataProvider = Union[YahooMarketDataProvider, StubMarketDataProvider, AlphaVantageProvider]
PortfolioRepo = Union[MemoryPortfolioRepository, SqlAlchemyPortfolioRepository]
TransactionRepo = Union[MemoryTransactionRepository, SqlAlchemyTransactionRepository]


def uses_memory_repo() -> bool:
    return get_settings().repo_kind.strip().lower() == "memory"


@lru_cache
def get_memory_store() -> MemoryStore:
    """Process-wide store backing the in-memory repositories."""
    return MemoryStore()


def get_repo_session() -> Generator[Optional[Session], None, None]:
    """Database session for the SQLite backend; None for the in-memory one."""
    if uses_memory_repo():
        yield None
        return
    yield from get_db()


def get_portfolio_repo(db: Optional[Session] = Depends(get_repo_session)) -> PortfolioRepo:
    """Provide PortfolioRepository instance."""
    if db is None:
        return MemoryPortfolioRepository(get_memory_store())
    return SqlAlchemyPortfolioRepository(db)


def get_transaction_repo(db: Optional[Session] = Depends(get_repo_session)) -> TransactionRepo:
    """Provide TransactionRepository instance."""
    if db is None:
        return MemoryTransactionRepository(get_memory_store())
    return SqlAlchemyTransactionRepository(db)


@lru_cache
def get_market_provider() -> MarketDataProvider:
    """Provide the shared market data provider (its caches live for the process)."""
    settings = get_settings()
    kind = settings.price_provider.strip().lower()
    if kind == "stub":
        return StubMarketDataProvider()
    yahoo = YahooMarketDataProvider(
        quote_ttl_seconds=settings.quote_cache_ttl_seconds,
        fx_ttl_seconds=settings.fx_cache_ttl_seconds,
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
        lookback_days=settings.history_lookback_days,
        failure_backoff_seconds=settings.failure_backoff_seconds,
        today=lambda: today_local(settings.timezone),
    )
    if kind in ALPHAVANTAGE_ALIASES:
        if not (settings.alphavantage_api_key or "").strip():
            logger.warning("Alpha Vantage not configured (no API key); falling back to Yahoo")
            return yahoo
        # Yahoo still serves history and FX
        return AlphaVantageProvider(
            settings.alphavantage_api_key,
            companion=yahoo,
            quote_ttl_seconds=settings.quote_cache_ttl_seconds,
            fetch_timeout_seconds=settings.fetch_timeout_seconds,
        )
    return yahoo


def get_portfolio_service(
    portfolio_repo: PortfolioRepo = Depends(get_portfolio_repo),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return PortfolioService(portfolio_repo=portfolio_repo)


def get_ledger_service(
    portfolio_repo: PortfolioRepo = Depends(get_portfolio_repo),
    transaction_repo: TransactionRepo = Depends(get_transaction_repo),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
    )


def get_analytics_service(
    portfolio_repo: PortfolioRepo = Depends(get_portfolio_repo),
    transaction_repo: TransactionRepo = Depends(get_transaction_repo),
    provider: MarketDataProvider = Depends(get_market_provider),
) -> AnalyticsService:
    """Provide AnalyticsService instance."""
    settings = get_settings()
    history = history_capability(provider)

    def today():
        return today_local(settings.timezone)

    return AnalyticsService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        valuation=ValuationService(provider, history, today=today),
        backtest=BacktestService(provider, history, today=today),
        rate_provider=provider,
        ref_currency=settings.get_ref_currency(),
    )
