"""Reference-currency normalization."""

import logging
import math
from typing import Optional

from stock_portfolios.core.exceptions import AppError
from stock_portfolios.providers.market_data_provider import RateProvider

logger = logging.getLogger(__name__)


class CurrencyNormalizer:
    """
    Converts amounts into one reference currency for a single computation.

    rate() never raises: a missing provider, a failed lookup or a
    non-positive rate all degrade to 1.0. Rates are memoized per instance,
    so build one normalizer per call.
    """

    def __init__(self, rate_provider: Optional[RateProvider], ref_currency: str):
        self._provider = rate_provider
        self.ref_currency = (ref_currency or "").strip().upper()
        self._rates: dict[str, float] = {}

    def rate(self, from_ccy: Optional[str]) -> float:
        """Multiplier such that amount_in_ref = amount_in_from * rate."""
        src = (from_ccy or "").strip().upper()
        if not src or src == self.ref_currency or self._provider is None:
            return 1.0
        if src in self._rates:
            return self._rates[src]

        rate = self._lookup(src)
        self._rates[src] = rate
        return rate

    def to_ref(self, amount: float, from_ccy: Optional[str]) -> float:
        return amount * self.rate(from_ccy)

    def _lookup(self, src: str) -> float:
        try:
            quote = self._provider.get_rate(src, self.ref_currency)
        except AppError as e:
            logger.warning("FX %s->%s unavailable, using 1.0: %s", src, self.ref_currency, e.message)
            return 1.0
        except Exception as e:
            logger.warning("FX %s->%s failed, using 1.0: %s", src, self.ref_currency, e)
            return 1.0

        rate = quote.rate
        if rate is None or not math.isfinite(rate) or rate <= 0:
            logger.warning("FX %s->%s returned invalid rate %r, using 1.0", src, self.ref_currency, rate)
            return 1.0
        return float(rate)
