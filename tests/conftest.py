"""
Pytest configuration and fixtures for portfolio analytics tests.

This module provides:
- Transaction factory helpers and fixed dates
- Deterministic fake market data (latest, historical, FX)
- In-memory and SQLite repository fixtures
- Service fixtures with injected ids, clock and "today"
- FastAPI test client with dependency overrides
"""

import itertools
from datetime import date, datetime, timedelta
from typing import Optional

import pytest
import pytz
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from stock_portfolios.config.settings import Settings, set_settings, reset_settings
from stock_portfolios.core.exceptions import DependencyUnavailableError, PriceNotFoundError
from stock_portfolios.domain.models import PriceBasis, Transaction, TradeType
from stock_portfolios.domain.views import PricePoint, Quote, RateQuote
from stock_portfolios.repositories.memory import (
    MemoryStore,
    MemoryPortfolioRepository,
    MemoryTransactionRepository,
)
from stock_portfolios.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from stock_portfolios.repositories.sqlalchemy import orm_models  # noqa: F401
from stock_portfolios.repositories.sqlalchemy import (
    SqlAlchemyPortfolioRepository,
    SqlAlchemyTransactionRepository,
)
from stock_portfolios.services import (
    AnalyticsService,
    BacktestService,
    CurrencyNormalizer,
    LedgerService,
    PortfolioService,
    ValuationService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================

EASTERN_TZ = pytz.timezone("US/Eastern")

# A Friday; "yesterday" is Thursday 2024-06-13
FIXED_TODAY = date(2024, 6, 14)
FIXED_NOW = EASTERN_TZ.localize(datetime(2024, 6, 14, 16, 0, 0))


def d(year: int, month: int, day: int) -> date:
    return date(year, month, day)


def fixed_today() -> date:
    return FIXED_TODAY


def fixed_clock() -> datetime:
    return FIXED_NOW


# =============================================================================
# TRANSACTION FACTORIES
# =============================================================================

_txn_counter = itertools.count(1)


def make_txn(
    trade_type: TradeType,
    on: date,
    total: float,
    symbol: str = "",
    shares: float = 0.0,
    currency: str = "USD",
    txn_id: Optional[str] = None,
    portfolio_id: str = "pf-1",
) -> Transaction:
    """Build a domain Transaction directly (bypasses validation)."""
    return Transaction(
        txn_id=txn_id or f"t{next(_txn_counter):05d}",
        portfolio_id=portfolio_id,
        trade_type=trade_type,
        date=on,
        currency=currency,
        total=total,
        symbol=symbol,
        shares=shares,
        price=abs(total) / shares if shares else 0.0,
    )


def buy(on: date, symbol: str, shares: float, total: float, **kw) -> Transaction:
    return make_txn(TradeType.BUY, on, -abs(total), symbol=symbol, shares=shares, **kw)


def sell(on: date, symbol: str, shares: float, total: float, **kw) -> Transaction:
    return make_txn(TradeType.SELL, on, abs(total), symbol=symbol, shares=shares, **kw)


def dividend(on: date, symbol: str, total: float, **kw) -> Transaction:
    return make_txn(TradeType.DIVIDEND, on, abs(total), symbol=symbol, **kw)


def deposit(on: date, total: float, **kw) -> Transaction:
    return make_txn(TradeType.CASH, on, abs(total), **kw)


def withdrawal(on: date, total: float, **kw) -> Transaction:
    return make_txn(TradeType.CASH, on, -abs(total), **kw)


def flat_history(start: date, end: date, price: float) -> dict[date, tuple[float, float]]:
    """Daily (open, close) series at one price for every calendar day in range."""
    out = {}
    day = start
    while day <= end:
        out[day] = (price, price)
        day += timedelta(days=1)
    return out


# =============================================================================
# MARKET DATA FAKES
# =============================================================================


class FakeMarketData:
    """
    Deterministic market data for testing.

    prices: latest price per symbol
    history: symbol -> {date: (open, close)}, looked up on-or-before
    rates: (from, to) -> rate
    """

    supports_history = True

    def __init__(
        self,
        prices: Optional[dict[str, float]] = None,
        history: Optional[dict[str, dict[date, tuple[float, float]]]] = None,
        rates: Optional[dict[tuple[str, str], float]] = None,
        as_of: Optional[datetime] = None,
    ):
        self.prices = dict(prices or {})
        self.history = {sym: dict(series) for sym, series in (history or {}).items()}
        self.rates = dict(rates or {})
        self.as_of = as_of or FIXED_NOW
        self.rate_calls = 0

    def get_latest_price(self, symbol: str) -> Quote:
        if symbol not in self.prices:
            raise PriceNotFoundError(symbol)
        return Quote(symbol=symbol, price=self.prices[symbol], as_of=self.as_of)

    def get_price_on_or_before(
        self,
        symbol: str,
        on: date,
        basis: PriceBasis = PriceBasis.CLOSE,
    ) -> PricePoint:
        series = self.history.get(symbol, {})
        days = [day for day in series if day <= on]
        if not days:
            raise PriceNotFoundError(symbol)
        day = max(days)
        open_, close = series[day]
        price = open_ if basis == PriceBasis.OPEN else close
        return PricePoint(symbol=symbol, price=price, date=day)

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        self.rate_calls += 1
        key = (from_ccy, to_ccy)
        if key not in self.rates:
            raise DependencyUnavailableError(f"no rate for {from_ccy}/{to_ccy}")
        return RateQuote(from_ccy=from_ccy, to_ccy=to_ccy, rate=self.rates[key], as_of=self.as_of)


class NoHistoryMarketData:
    """Latest prices only; no historical capability."""

    supports_history = False

    def __init__(self, prices: Optional[dict[str, float]] = None):
        self.prices = dict(prices or {})

    def get_latest_price(self, symbol: str) -> Quote:
        if symbol not in self.prices:
            raise PriceNotFoundError(symbol)
        return Quote(symbol=symbol, price=self.prices[symbol], as_of=FIXED_NOW)

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        raise DependencyUnavailableError("no FX")


class BrokenRateProvider:
    """Rate provider that raises an unexpected exception."""

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def market() -> FakeMarketData:
    """Empty fake market; tests fill in prices, history and rates."""
    return FakeMarketData()


@pytest.fixture
def usd() -> CurrencyNormalizer:
    """Normalizer with USD reference and no FX provider (all rates 1.0)."""
    return CurrencyNormalizer(None, "USD")


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def portfolio_repo(memory_store) -> MemoryPortfolioRepository:
    """Provide in-memory PortfolioRepository."""
    return MemoryPortfolioRepository(memory_store)


@pytest.fixture
def transaction_repo(memory_store) -> MemoryTransactionRepository:
    """Provide in-memory TransactionRepository."""
    return MemoryTransactionRepository(memory_store)


@pytest.fixture
def sql_portfolio_repo(test_session) -> SqlAlchemyPortfolioRepository:
    """Provide SQLite-backed PortfolioRepository."""
    return SqlAlchemyPortfolioRepository(test_session)


@pytest.fixture
def sql_transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide SQLite-backed TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def id_factory():
    """Sequential ids: id-0001, id-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def portfolio_service(portfolio_repo, id_factory) -> PortfolioService:
    return PortfolioService(portfolio_repo, id_factory=id_factory, clock=fixed_clock)


@pytest.fixture
def ledger_service(portfolio_repo, transaction_repo, id_factory) -> LedgerService:
    return LedgerService(
        portfolio_repo,
        transaction_repo,
        id_factory=id_factory,
        clock=fixed_clock,
    )


@pytest.fixture
def valuation_service(market) -> ValuationService:
    return ValuationService(market, market, today=fixed_today)


@pytest.fixture
def backtest_service(market) -> BacktestService:
    return BacktestService(market, market, today=fixed_today)


@pytest.fixture
def analytics_service(portfolio_repo, transaction_repo, market) -> AnalyticsService:
    return AnalyticsService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        valuation=ValuationService(market, market, today=fixed_today),
        backtest=BacktestService(market, market, today=fixed_today),
        rate_provider=market,
        ref_currency="USD",
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(portfolio_repo, transaction_repo, market, analytics_service) -> TestClient:
    """Provide FastAPI test client backed by in-memory repositories and fake market data."""
    from stock_portfolios.main import app
    from stock_portfolios.api import deps

    set_settings(Settings(repo_kind="memory", price_provider="stub", ref_currency="USD"))

    app.dependency_overrides[deps.get_portfolio_repo] = lambda: portfolio_repo
    app.dependency_overrides[deps.get_transaction_repo] = lambda: transaction_repo
    app.dependency_overrides[deps.get_market_provider] = lambda: market
    app.dependency_overrides[deps.get_analytics_service] = lambda: analytics_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_close(actual: float, expected: float, tolerance: float = 1e-6) -> None:
    """Assert two floats are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
