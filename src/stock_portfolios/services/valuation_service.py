"""Allocation and summary valuation over a transaction set."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from stock_portfolios.core.exceptions import AppError, DependencyUnavailableError, ValidationError
from stock_portfolios.core.timezone import today_local
from stock_portfolios.domain.models import AllocationBasis, PriceBasis, Transaction
from stock_portfolios.domain.views import (
    AllocationItem,
    AllocationView,
    PositionBucket,
    PositionSummary,
    SummaryView,
)
from stock_portfolios.providers.market_data_provider import (
    HistoricalPriceProvider,
    PriceProvider,
)
from stock_portfolios.services.cash_reconciler import CashReconciler
from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.ordering import order_transactions
from stock_portfolios.services.position_ledger import PositionLedger, contract_multiplier

logger = logging.getLogger(__name__)

UNSUPPORTED_BASIS_MESSAGE = 'unsupported basis (use "invested" or "market_value")'


def parse_allocation_basis(basis: Optional[str]) -> AllocationBasis:
    """Parse an allocation basis; blank means invested."""
    text = (basis or "").strip().lower()
    if not text:
        return AllocationBasis.INVESTED
    try:
        return AllocationBasis(text)
    except ValueError:
        raise ValidationError(UNSUPPORTED_BASIS_MESSAGE)


@dataclass
class _PricedPosition:
    bucket: PositionBucket
    price: float
    as_of: datetime
    market_value: float
    daily_pl: Optional[float] = None
    daily_pl_percent: Optional[float] = None
    prior_market_value: Optional[float] = None


class ValuationService:
    """
    Prices ledger positions into allocation and summary views.

    The historical provider is optional; without it daily P/L is left unset.
    Symbols whose price cannot be resolved are skipped, not fatal.
    """

    def __init__(
        self,
        price_provider: Optional[PriceProvider],
        history_provider: Optional[HistoricalPriceProvider] = None,
        today: Callable[[], date] = today_local,
    ):
        self._prices = price_provider
        self._history = history_provider
        self._today = today

    def allocations(
        self,
        transactions: Iterable[Transaction],
        normalizer: CurrencyNormalizer,
        basis: Optional[str] = None,
    ) -> AllocationView:
        """
        Build an allocation breakdown weighted by invested capital or market value.

        Raises:
            ValidationError: Unknown basis
            DependencyUnavailableError: market_value requested without a price provider
        """
        alloc_basis = parse_allocation_basis(basis)
        ledger = PositionLedger.fold(transactions, normalizer)

        if alloc_basis == AllocationBasis.INVESTED:
            return self._invested_allocations(ledger, normalizer)

        if self._prices is None:
            raise DependencyUnavailableError("no price provider configured for market_value basis")
        return self._market_value_allocations(ledger, normalizer)

    def summary(
        self,
        transactions: Iterable[Transaction],
        normalizer: CurrencyNormalizer,
    ) -> SummaryView:
        """
        Price every held position and add cash-adjusted P/L.

        Raises:
            DependencyUnavailableError: No price provider configured
        """
        if self._prices is None:
            raise DependencyUnavailableError("no price provider configured (required for summary)")

        ordered = order_transactions(transactions)
        ledger = PositionLedger.fold(ordered, normalizer)
        cash = CashReconciler.fold(ordered, normalizer)

        priced = self._price_positions(ledger.held(), normalizer)

        view = SummaryView(ref_currency=normalizer.ref_currency)
        total_mv = sum(p.market_value for p in priced)
        total_inv = sum(p.bucket.invested for p in priced)

        for p in priced:
            pl = p.market_value - p.bucket.invested
            view.positions.append(
                PositionSummary(
                    symbol=p.bucket.symbol,
                    shares=p.bucket.shares,
                    invested=p.bucket.invested,
                    price=p.price,
                    market_value=p.market_value,
                    unrealized_pl=pl,
                    unrealized_pl_percent=_percent(pl, p.bucket.invested),
                    weight_percent_by_market_value=_percent(p.market_value, total_mv),
                    daily_pl=p.daily_pl,
                    daily_pl_percent=p.daily_pl_percent,
                )
            )
        view.positions.sort(key=lambda s: (-s.market_value, s.symbol))

        view.as_of = _latest(p.as_of for p in priced)
        view.total_invested = total_inv
        view.total_market_value = total_mv
        view.total_unrealized_pl = total_mv - total_inv
        view.total_unrealized_pl_percent = _percent(total_mv - total_inv, total_inv)

        view.cash_balance = cash.ending_balance
        view.deposits = cash.deposits
        view.withdrawals = cash.withdrawals
        view.inferred_deposits = cash.inferred
        view.effective_cash_in = cash.effective_cash_in
        view.peak_contribution = cash.peak_contribution
        view.equity = total_mv + cash.ending_balance
        view.cash_adjusted_pl = view.equity - cash.effective_cash_in
        view.cash_adjusted_pl_percent = _percent(view.cash_adjusted_pl, cash.peak_contribution)
        view.cash_adjusted_pl_percent_current = _percent(view.cash_adjusted_pl, cash.effective_cash_in)

        with_daily = [p for p in priced if p.daily_pl is not None]
        if with_daily:
            view.daily_pl = sum(p.daily_pl for p in with_daily)
            prior_mv = sum(p.prior_market_value for p in with_daily)
            view.daily_pl_percent = _percent(view.daily_pl, prior_mv)
        return view

    def _invested_allocations(
        self,
        ledger: PositionLedger,
        normalizer: CurrencyNormalizer,
    ) -> AllocationView:
        buckets = [
            b for b in ledger.buckets.values()
            if b.shares > 0 or b.invested != 0
        ]
        total = sum(b.invested for b in buckets)
        items = [
            AllocationItem(
                symbol=b.symbol,
                shares=b.shares,
                invested=b.invested,
                weight_percent=_percent(b.invested, total),
            )
            for b in buckets
        ]
        return AllocationView(
            basis=AllocationBasis.INVESTED.value,
            ref_currency=normalizer.ref_currency,
            items=_sorted_items(items),
            total_invested=total,
        )

    def _market_value_allocations(
        self,
        ledger: PositionLedger,
        normalizer: CurrencyNormalizer,
    ) -> AllocationView:
        priced = self._price_positions(ledger.held(), normalizer)
        total_mv = sum(p.market_value for p in priced)
        items = [
            AllocationItem(
                symbol=p.bucket.symbol,
                shares=p.bucket.shares,
                invested=p.bucket.invested,
                market_value=p.market_value,
                weight_percent=_percent(p.market_value, total_mv),
                daily_pl=p.daily_pl,
                daily_pl_percent=p.daily_pl_percent,
            )
            for p in priced
        ]
        return AllocationView(
            basis=AllocationBasis.MARKET_VALUE.value,
            ref_currency=normalizer.ref_currency,
            items=_sorted_items(items),
            total_invested=sum(p.bucket.invested for p in priced),
            total_market_value=total_mv,
            as_of=_latest(p.as_of for p in priced),
        )

    def _price_positions(
        self,
        buckets: list[PositionBucket],
        normalizer: CurrencyNormalizer,
    ) -> list[_PricedPosition]:
        """Price each bucket, skipping symbols whose quote fails."""
        prior_day = self._today() - timedelta(days=1)
        priced: list[_PricedPosition] = []

        for bucket in buckets:
            try:
                quote = self._prices.get_latest_price(bucket.symbol)
            except AppError as e:
                logger.warning("Skipping %s: %s", bucket.symbol, e.message)
                continue

            factor = bucket.shares * contract_multiplier(bucket.symbol) * normalizer.rate(bucket.currency)
            position = _PricedPosition(
                bucket=bucket,
                price=quote.price,
                as_of=quote.as_of,
                market_value=factor * quote.price,
            )

            prior = self._prior_price(bucket.symbol, prior_day)
            if prior is not None:
                position.daily_pl = factor * (quote.price - prior)
                position.prior_market_value = factor * prior
                position.daily_pl_percent = _percent(position.daily_pl, position.prior_market_value)
            priced.append(position)

        return priced

    def _prior_price(self, symbol: str, on: date) -> Optional[float]:
        if self._history is None:
            return None
        try:
            point = self._history.get_price_on_or_before(symbol, on, PriceBasis.CLOSE)
        except AppError as e:
            logger.debug("No prior close for %s on %s: %s", symbol, on, e.message)
            return None
        return point.price


def _percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100.0


def _sorted_items(items: list[AllocationItem]) -> list[AllocationItem]:
    return sorted(items, key=lambda i: (-i.weight_percent, i.symbol))


def _latest(stamps: Iterable[Optional[datetime]]) -> Optional[datetime]:
    values = [s for s in stamps if s is not None]
    return max(values) if values else None
