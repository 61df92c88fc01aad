"""Stub market data provider for offline/testing use."""

import random
from datetime import date, datetime, timezone
from typing import Optional

from stock_portfolios.core.exceptions import DependencyUnavailableError, PriceNotFoundError
from stock_portfolios.domain.models import PriceBasis
from stock_portfolios.domain.views import Quote, PricePoint, RateQuote


# Deterministic fake prices for common symbols: (close, open)
_STUB_PRICES: dict[str, tuple[float, float]] = {
    "AAPL": (185.50, 184.25),
    "GOOGL": (142.75, 141.50),
    "MSFT": (378.25, 376.80),
    "AMZN": (178.50, 177.25),
    "TSLA": (248.75, 250.10),
    "NVDA": (485.25, 482.50),
    "SPY": (485.25, 484.10),
    "QQQ": (418.75, 417.50),
    "VTI": (252.30, 251.80),
    "0050.TW": (152.40, 151.90),
}

# Units of TWD per one unit of currency
_STUB_TWD_RATES: dict[str, float] = {
    "TWD": 1.0,
    "USD": 32.0,
    "AUD": 21.0,
    "EUR": 35.0,
    "JPY": 0.21,
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Known symbols use fixed prices; unknown symbols get a price derived from
    the symbol itself, so repeated calls always agree. History is flat.
    """

    supports_history = True

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of

    def get_latest_price(self, symbol: str) -> Quote:
        sym = (symbol or "").strip().upper()
        if not sym:
            raise PriceNotFoundError(symbol or "")
        close, _ = self._prices(sym)
        return Quote(symbol=sym, price=close, as_of=self._now())

    def get_price_on_or_before(
        self,
        symbol: str,
        on: date,
        basis: PriceBasis = PriceBasis.CLOSE,
    ) -> PricePoint:
        sym = (symbol or "").strip().upper()
        if not sym:
            raise PriceNotFoundError(symbol or "")
        close, open_ = self._prices(sym)
        price = open_ if PriceBasis(basis) == PriceBasis.OPEN else close
        return PricePoint(symbol=sym, price=price, date=on)

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        src = (from_ccy or "").strip().upper()
        dst = (to_ccy or "").strip().upper()
        if src not in _STUB_TWD_RATES or dst not in _STUB_TWD_RATES:
            raise DependencyUnavailableError(f"no stub rate for {src}/{dst}")
        rate = _STUB_TWD_RATES[src] / _STUB_TWD_RATES[dst]
        return RateQuote(from_ccy=src, to_ccy=dst, rate=rate, as_of=self._now())

    def _prices(self, symbol: str) -> tuple[float, float]:
        if symbol in _STUB_PRICES:
            return _STUB_PRICES[symbol]
        rng = random.Random(symbol)
        close = round(50 + rng.random() * 200, 2)
        change_pct = (rng.random() - 0.5) * 0.04
        return close, round(close / (1 + change_pct), 2)

    def _now(self) -> datetime:
        return self._as_of or datetime.now(timezone.utc)
