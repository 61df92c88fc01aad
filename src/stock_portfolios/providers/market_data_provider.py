"""Market data provider protocols and capability checks."""

from datetime import date
from typing import Any, Optional, Protocol

from stock_portfolios.domain.models import PriceBasis
from stock_portfolios.domain.views import Quote, PricePoint, RateQuote


class PriceProvider(Protocol):
    """
    Protocol for latest-price lookups.

    Implementations raise PriceNotFoundError for unknown symbols and
    DependencyUnavailableError for transport failures.
    """

    def get_latest_price(self, symbol: str) -> Quote:
        """Return the latest price for a symbol."""
        ...


class HistoricalPriceProvider(Protocol):
    """Protocol for historical daily prices."""

    supports_history: bool

    def get_price_on_or_before(
        self,
        symbol: str,
        on: date,
        basis: PriceBasis = PriceBasis.CLOSE,
    ) -> PricePoint:
        """
        Return the latest available price at or before `on`, never after.

        PricePoint.date is the trading day the price actually belongs to.
        """
        ...


class RateProvider(Protocol):
    """Protocol for currency exchange rates."""

    def get_rate(self, from_ccy: str, to_ccy: str) -> RateQuote:
        """Return how many `to_ccy` one unit of `from_ccy` buys."""
        ...


def supports_history(provider: Any) -> bool:
    """Check whether a provider object can answer historical lookups."""
    return provider is not None and bool(getattr(provider, "supports_history", False))


def history_capability(provider: Any) -> Optional[HistoricalPriceProvider]:
    """Return the provider as a historical source if it has that capability."""
    return provider if supports_history(provider) else None
