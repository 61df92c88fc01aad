"""Average-cost position ledger."""

import re
from typing import Iterable

from stock_portfolios.domain.models import Transaction, TradeType
from stock_portfolios.domain.views import PositionBucket
from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.ordering import order_transactions

# OCC option symbology: root, YYMMDD expiry, call/put, strike x 1000
OPTION_SYMBOL_RE = re.compile(r"^[A-Z]{1,6}\d{6}[CP]\d{8}$")
OPTION_CONTRACT_MULTIPLIER = 100.0


def contract_multiplier(symbol: str) -> float:
    """Return 100 for option contracts, 1 for everything else."""
    if OPTION_SYMBOL_RE.match((symbol or "").strip().upper()):
        return OPTION_CONTRACT_MULTIPLIER
    return 1.0


class PositionLedger:
    """
    Folds transactions into per-symbol shares and invested capital.

    Invested capital is the cost of currently held shares in the reference
    currency. A sell removes cost in proportion to the fraction of the
    position sold. Shares may go negative on over-selling; invested never does.
    Dividends only update the currency of their symbol; cash entries are ignored.
    """

    def __init__(self, normalizer: CurrencyNormalizer):
        self._normalizer = normalizer
        self._buckets: dict[str, PositionBucket] = {}

    @classmethod
    def fold(
        cls,
        transactions: Iterable[Transaction],
        normalizer: CurrencyNormalizer,
    ) -> "PositionLedger":
        ledger = cls(normalizer)
        for txn in order_transactions(transactions):
            ledger.apply(txn)
        return ledger

    @property
    def buckets(self) -> dict[str, PositionBucket]:
        return self._buckets

    def held(self) -> list[PositionBucket]:
        """Buckets with a positive share count."""
        return [b for b in self._buckets.values() if b.shares > 0]

    def apply(self, txn: Transaction) -> None:
        if txn.is_cash or not txn.symbol:
            return

        bucket = self._buckets.get(txn.symbol)
        if bucket is None:
            bucket = PositionBucket(symbol=txn.symbol)
            self._buckets[txn.symbol] = bucket
        # Last seen currency, dividends included
        if txn.currency:
            bucket.currency = txn.currency.strip().upper()
        if txn.trade_type not in (TradeType.BUY, TradeType.SELL):
            return

        shares = float(txn.shares)
        if txn.trade_type == TradeType.BUY:
            bucket.shares += shares
            bucket.invested += abs(float(txn.total)) * self._normalizer.rate(txn.currency)
            return

        held = bucket.shares
        avg_cost = bucket.average_cost
        sold = min(shares, held)
        if held > 0 and sold >= held:
            bucket.invested = 0.0
        else:
            bucket.invested = max(0.0, bucket.invested - avg_cost * max(sold, 0.0))
        bucket.shares -= shares
