"""Market data providers module."""

from stock_portfolios.providers.market_data_provider import (
    PriceProvider,
    HistoricalPriceProvider,
    RateProvider,
    supports_history,
    history_capability,
)
from stock_portfolios.providers.cache import TTLCache
from stock_portfolios.providers.stub_provider import StubMarketDataProvider
from stock_portfolios.providers.alphavantage_provider import AlphaVantageProvider
from stock_portfolios.providers.yahoo_provider import YahooMarketDataProvider

__all__ = [
    "PriceProvider",
    "HistoricalPriceProvider",
    "RateProvider",
    "supports_history",
    "history_capability",
    "TTLCache",
    "StubMarketDataProvider",
    "AlphaVantageProvider",
    "YahooMarketDataProvider",
]
