"""
Yahoo Finance market data via yfinance: latest prices, daily open/close
history and FX rates.

In-memory TTL caches per symbol / currency pair; every remote call is bounded
by a timeout. Unknown symbols raise PriceNotFoundError, transport failures
raise DependencyUnavailableError.
"""

import bisect
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional

from stock_portfolios.core.exceptions import (
    AppError,
    DependencyUnavailableError,
    PriceNotFoundError,
)
from stock_portfolios.domain.models import PriceBasis
from stock_portfolios.domain.views import Quote, PricePoint, RateQuote
from stock_portfolios.providers.cache import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_TTL_SECONDS = 60
DEFAULT_FX_TTL_SECONDS = 300
DEFAULT_HISTORY_TTL_SECONDS = 3600
DEFAULT_FETCH_TIMEOUT_SECONDS = 8
DEFAULT_LOOKBACK_DAYS = 14
DEFAULT_FAILURE_BACKOFF_SECONDS = 60


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _is_missing(value: Any) -> bool:
    import pandas as pd

    return value is None or bool(pd.isna(value))


@dataclass
class _DailySeries:
    """Cached daily history for one symbol, ordered by trading day."""

    start: date
    dates: list[date] = field(default_factory=list)
    opens: list[Optional[float]] = field(default_factory=list)
    closes: list[Optional[float]] = field(default_factory=list)

    def covers(self, start: date) -> bool:
        return self.start <= start

    def on_or_before(self, on: date, basis: PriceBasis) -> Optional[tuple[float, date]]:
        values = self.opens if basis == PriceBasis.OPEN else self.closes
        i = bisect.bisect_right(self.dates, on) - 1
        while i >= 0:
            if values[i] is not None:
                return values[i], self.dates[i]
            i -= 1
        return None


class YahooMarketDataProvider:
    """
    Price, history and FX provider backed by Yahoo Finance.

    Implements PriceProvider, HistoricalPriceProvider and RateProvider.
    """

    supports_history = True

    def __init__(
        self,
        quote_ttl_seconds: float = DEFAULT_QUOTE_TTL_SECONDS,
        fx_ttl_seconds: float = DEFAULT_FX_TTL_SECONDS,
        history_ttl_seconds: float = DEFAULT_HISTORY_TTL_SECONDS,
        fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        failure_backoff_seconds: float = DEFAULT_FAILURE_BACKOFF_SECONDS,
        today: Optional[Callable[[], date]] = None,
    ):
        self._quotes = TTLCache(quote_ttl_seconds)
        self._rates = TTLCache(fx_ttl_seconds)
        self._history = TTLCache(history_ttl_seconds)
        # Symbols whose history fetch failed recently; not retried until expiry
        self._history_failures = TTLCache(failure_backoff_seconds)
        self._fetch_timeout = fetch_timeout_seconds
        self._lookback = timedelta(days=lookback_days)
        self._today = today or date.today

    # ------------------------------------------------------------------
    # Latest prices
    # ------------------------------------------------------------------

    def get_latest_price(self, symbol: str) -> Quote:
        sym = (symbol or "").strip().upper()
        if not sym:
            raise PriceNotFoundError(symbol or "")
        return self._quotes.get_or_fetch(
            sym, lambda: self._with_timeout(self._fetch_latest, sym)
        )

    def _fetch_latest(self, symbol: str) -> Quote:
        yf = _get_yf()
        info = yf.Ticker(symbol).info
        if not isinstance(info, dict):
            raise PriceNotFoundError(symbol)
        # Price: currentPrice preferred, then regularMarketPrice
        price = info.get("currentPrice")
        if price is None:
            price = info.get("regularMarketPrice")
        try:
            price = float(price)
        except (TypeError, ValueError):
            raise PriceNotFoundError(symbol)
        if price <= 0:
            raise PriceNotFoundError(symbol)
        return Quote(symbol=symbol, price=price, as_of=self._as_of(info.get("regularMarketTime")))

    # ------------------------------------------------------------------
    # Historical prices
    # ------------------------------------------------------------------

    def get_price_on_or_before(
        self,
        symbol: str,
        on: date,
        basis: PriceBasis = PriceBasis.CLOSE,
    ) -> PricePoint:
        sym = (symbol or "").strip().upper()
        if not sym:
            raise PriceNotFoundError(symbol or "")
        start = on - self._lookback
        failure = self._history_failures.get(sym)
        if failure is not None:
            raise DependencyUnavailableError(failure)
        try:
            series = self._history.get_or_fetch(
                sym,
                lambda: self._with_timeout(self._fetch_history, sym, start),
                is_valid=lambda s: s.covers(start),
            )
        except DependencyUnavailableError as e:
            self._history_failures.put(sym, e.message)
            raise
        hit = series.on_or_before(on, PriceBasis(basis))
        if hit is None:
            raise PriceNotFoundError(sym)
        price, actual_date = hit
        return PricePoint(symbol=sym, price=price, date=actual_date)

    def _fetch_history(self, symbol: str, start: date) -> _DailySeries:
        yf = _get_yf()
        end = self._today() + timedelta(days=1)
        hist = yf.Ticker(symbol).history(start=start, end=end, auto_adjust=False)
        series = _DailySeries(start=start)
        if hist is None or hist.empty:
            return series
        for idx, row in hist.iterrows():
            dt = idx.date() if hasattr(idx, "date") else idx
            open_ = row.get("Open")
            close = row.get("Close")
            series.dates.append(dt)
            series.opens.append(None if _is_missing(open_) else float(open_))
            series.closes.append(None if _is_missing(close) else float(close))
        return series

    # ------------------------------------------------------------------
    # FX rates
    # ------------------------------------------------------------------

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        src = (from_ccy or "").strip().upper()
        dst = (to_ccy or "").strip().upper()
        if not src or not dst:
            raise DependencyUnavailableError("invalid currency")
        if src == dst:
            return RateQuote(from_ccy=src, to_ccy=dst, rate=1.0, as_of=datetime.now(timezone.utc))
        return self._rates.get_or_fetch(
            (src, dst), lambda: self._with_timeout(self._fetch_rate, src, dst)
        )

    def _fetch_rate(self, src: str, dst: str) -> RateQuote:
        yf = _get_yf()
        pair = f"{src}{dst}=X"
        info = yf.Ticker(pair).info
        rate = info.get("regularMarketPrice") if isinstance(info, dict) else None
        try:
            rate = float(rate)
        except (TypeError, ValueError):
            raise DependencyUnavailableError(f"fx rate not found: {pair}")
        if rate <= 0:
            raise DependencyUnavailableError(f"invalid fx rate: {pair}")
        return RateQuote(
            from_ccy=src,
            to_ccy=dst,
            rate=rate,
            as_of=self._as_of(info.get("regularMarketTime")),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _with_timeout(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a remote call bounded by the fetch timeout."""
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            fut = executor.submit(fn, *args)
            return fut.result(timeout=self._fetch_timeout)
        except AppError:
            raise
        except FuturesTimeoutError:
            logger.warning("Yahoo request timed out: %s%s", fn.__name__, args)
            raise DependencyUnavailableError(f"yahoo request timed out for {args[0]}")
        except Exception as e:
            logger.warning("Yahoo request failed: %s%s: %s", fn.__name__, args, e)
            raise DependencyUnavailableError(f"yahoo request failed for {args[0]}: {e}")
        finally:
            executor.shutdown(wait=False)

    @staticmethod
    def _as_of(epoch: Any) -> datetime:
        try:
            if epoch:
                return datetime.fromtimestamp(int(epoch), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            pass
        return datetime.now(timezone.utc)
