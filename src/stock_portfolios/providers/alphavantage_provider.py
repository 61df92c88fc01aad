"""
Alpha Vantage latest prices (GLOBAL_QUOTE) over httpx.

Alpha Vantage only answers latest quotes here; historical prices and FX
rates are delegated to a companion provider when one is given.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

import httpx

from stock_portfolios.core.exceptions import DependencyUnavailableError, PriceNotFoundError
from stock_portfolios.domain.models import PriceBasis
from stock_portfolios.domain.views import Quote, PricePoint, RateQuote
from stock_portfolios.providers.cache import TTLCache
from stock_portfolios.providers.market_data_provider import supports_history

logger = logging.getLogger(__name__)

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
DEFAULT_QUOTE_TTL_SECONDS = 60
DEFAULT_FETCH_TIMEOUT_SECONDS = 8

# Alpha Vantage reports throttling with HTTP 200 and one of these keys
_RATE_LIMIT_KEYS = ("Note", "Information")


class AlphaVantageProvider:
    """
    Price provider backed by the Alpha Vantage GLOBAL_QUOTE endpoint.

    Implements PriceProvider. When a companion is given, also answers
    historical and FX lookups through it.
    """

    def __init__(
        self,
        api_key: str,
        companion: Optional[Any] = None,
        quote_ttl_seconds: float = DEFAULT_QUOTE_TTL_SECONDS,
        fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        if not (api_key or "").strip():
            raise DependencyUnavailableError("ALPHAVANTAGE_API_KEY not set")
        self._api_key = api_key.strip()
        self._companion = companion
        self._quotes = TTLCache(quote_ttl_seconds)
        self._client = client or httpx.Client(
            timeout=fetch_timeout_seconds,
            headers={"User-Agent": "stock-portfolios/1.0"},
        )

    @property
    def supports_history(self) -> bool:
        return supports_history(self._companion)

    def get_latest_price(self, symbol: str) -> Quote:
        sym = (symbol or "").strip().upper()
        if not sym:
            raise PriceNotFoundError(symbol or "")
        return self._quotes.get_or_fetch(sym, lambda: self._fetch_quote(sym))

    def _fetch_quote(self, symbol: str) -> Quote:
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key}
        try:
            response = self._client.get(ALPHAVANTAGE_URL, params=params)
        except httpx.TimeoutException:
            logger.warning("Alpha Vantage request timed out for %s", symbol)
            raise DependencyUnavailableError(f"alpha vantage request timed out for {symbol}")
        except httpx.HTTPError as e:
            logger.warning("Alpha Vantage request failed for %s: %s", symbol, e)
            raise DependencyUnavailableError(f"alpha vantage request failed for {symbol}: {e}")

        if response.status_code != 200:
            raise DependencyUnavailableError(f"alpha vantage http {response.status_code}")
        try:
            payload = response.json()
        except ValueError:
            raise DependencyUnavailableError(f"alpha vantage returned invalid JSON for {symbol}")
        if not isinstance(payload, dict):
            raise PriceNotFoundError(symbol)

        if any(key in payload for key in _RATE_LIMIT_KEYS):
            logger.warning("Alpha Vantage rate limit hit for %s", symbol)
            raise DependencyUnavailableError("alpha vantage rate limit or information note")

        quote = payload.get("Global Quote")
        if not isinstance(quote, dict) or not quote:
            raise PriceNotFoundError(symbol)
        try:
            price = float(quote.get("05. price"))
        except (TypeError, ValueError):
            raise PriceNotFoundError(symbol)
        if price <= 0:
            raise PriceNotFoundError(symbol)
        return Quote(symbol=symbol, price=price, as_of=_trading_day(quote.get("07. latest trading day")))

    def get_price_on_or_before(
        self,
        symbol: str,
        on: date,
        basis: PriceBasis = PriceBasis.CLOSE,
    ) -> PricePoint:
        if not self.supports_history:
            raise DependencyUnavailableError("historical prices unavailable")
        return self._companion.get_price_on_or_before(symbol, on, basis)

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        if self._companion is None:
            raise DependencyUnavailableError("fx rates unavailable")
        return self._companion.get_rate(from_ccy, to_ccy)


def _trading_day(value: Any) -> datetime:
    try:
        day = datetime.strptime(str(value), "%Y-%m-%d")
    except ValueError:
        return datetime.now(timezone.utc)
    return day.replace(tzinfo=timezone.utc)
