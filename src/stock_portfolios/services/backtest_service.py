"""Alternate-instrument backtest over a portfolio's cash-flow schedule."""

import logging
from datetime import date, timedelta
from itertools import groupby
from typing import Callable, Iterable, Optional

from stock_portfolios.core.exceptions import AppError, DependencyUnavailableError, ValidationError
from stock_portfolios.core.timezone import today_local
from stock_portfolios.domain.models import CashEventKind, PriceBasis, Transaction
from stock_portfolios.domain.views import (
    BacktestEvent,
    BacktestTraceEntry,
    BacktestView,
    CashReconciliation,
)
from stock_portfolios.providers.market_data_provider import (
    HistoricalPriceProvider,
    PriceProvider,
)
from stock_portfolios.services.cash_reconciler import CashReconciler
from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.drawdown import DrawdownTracker
from stock_portfolios.services.ordering import order_transactions
from stock_portfolios.services.position_ledger import PositionLedger, contract_multiplier

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_CURRENCY = "USD"


def parse_price_basis(basis: Optional[str]) -> PriceBasis:
    """Parse a price basis; blank means close."""
    text = (basis or "").strip().lower()
    if not text:
        return PriceBasis.CLOSE
    try:
        return PriceBasis(text)
    except ValueError:
        raise ValidationError('unsupported price_basis (use "open" or "close")')


def build_events(cash: CashReconciliation) -> list[BacktestEvent]:
    """Merge deposits, inferred deposits and withdrawals; deposits first on a tie."""
    events = [BacktestEvent(e.date, CashEventKind.DEPOSIT, e.amount) for e in cash.deposit_events]
    events += [BacktestEvent(e.date, CashEventKind.DEPOSIT, e.amount) for e in cash.inferred_events]
    events += [BacktestEvent(e.date, CashEventKind.WITHDRAWAL, e.amount) for e in cash.withdrawal_events]
    events.sort(key=lambda e: (e.date, 0 if e.kind == CashEventKind.DEPOSIT else 1))
    return events


class _Position:
    """Running alternate-instrument holding."""

    def __init__(self, multiplier: float, rate: float):
        self.multiplier = multiplier
        self.rate = rate
        self.shares = 0.0

    def apply(self, event: BacktestEvent, price: float) -> float:
        """Buy or sell for one event; returns the share delta."""
        amount_quote = event.amount / self.rate
        qty = amount_quote / (price * self.multiplier)
        before = self.shares
        if event.kind == CashEventKind.DEPOSIT:
            self.shares += qty
        else:
            self.shares = max(0.0, self.shares - qty)
        return self.shares - before

    def equity(self, price: float) -> float:
        return self.shares * price * self.multiplier * self.rate


class BacktestService:
    """
    Replays the cash-flow schedule into a single alternate instrument.

    With a historical provider the replay walks every calendar day from the
    first cash event to today. Without one it falls back to applying each
    event at the current price.
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

    def run(
        self,
        transactions: Iterable[Transaction],
        symbol: str,
        normalizer: CurrencyNormalizer,
        currency: Optional[str] = None,
        price_basis: Optional[str] = None,
        debug: bool = False,
    ) -> BacktestView:
        """
        Run the backtest for the given transaction scope.

        Raises:
            ValidationError: Missing symbol or bad price basis
            DependencyUnavailableError: No price provider configured
            NotFoundError: Current price of the alternate symbol cannot be resolved
        """
        if self._prices is None:
            raise DependencyUnavailableError("no price provider configured (required for backtest)")
        sym = (symbol or "").strip().upper()
        if not sym:
            raise ValidationError("symbol is required")
        quote_ccy = (currency or "").strip().upper() or DEFAULT_QUOTE_CURRENCY
        basis = parse_price_basis(price_basis)

        ordered = order_transactions(transactions)
        cash = CashReconciler.fold(ordered, normalizer)
        events = build_events(cash)

        quote = self._prices.get_latest_price(sym)
        position = _Position(contract_multiplier(sym), normalizer.rate(quote_ccy))
        tracker = DrawdownTracker()

        view = BacktestView(
            symbol=sym,
            currency=quote_ccy,
            ref_currency=normalizer.ref_currency,
            price_basis=basis.value,
            as_of=quote.as_of,
            current_price=quote.price,
            multiplier=position.multiplier,
            effective_cash_in=cash.effective_cash_in,
            peak_contribution=cash.peak_contribution,
            event_count=len(events),
        )

        if self._history is not None:
            view.day_by_day = True
            self._replay_daily(events, sym, basis, position, tracker, view, debug)
        elif events:
            logger.warning(
                "No historical prices for %s; replaying %d events at current price %.4f",
                sym, len(events), quote.price,
            )
            self._replay_at_current(events, quote.price, quote.as_of.date(), position, tracker, view, debug)

        view.shares = position.shares
        view.alt_equity = position.equity(quote.price)
        tracker.update(view.alt_equity)

        view.alt_pl = view.alt_equity - cash.effective_cash_in
        view.alt_pl_percent = (
            view.alt_pl / cash.peak_contribution * 100.0 if cash.peak_contribution > 0 else 0.0
        )
        view.alt_max_drawdown = tracker.max_drawdown

        if self._history is not None:
            view.actual_max_drawdown = self._actual_drawdown(ordered, normalizer)
        return view

    def _replay_daily(
        self,
        events: list[BacktestEvent],
        symbol: str,
        basis: PriceBasis,
        position: _Position,
        tracker: DrawdownTracker,
        view: BacktestView,
        debug: bool,
    ) -> None:
        if not events:
            return
        end = max(self._today(), events[-1].date)
        pending = 0
        day = events[0].date

        while day <= end:
            point = self._price_on(symbol, day, basis)
            if point is None:
                view.skipped_days += 1
                day += timedelta(days=1)
                continue

            # events on unpriced days carry forward to the next priced day
            while pending < len(events) and events[pending].date <= day:
                event = events[pending]
                delta = position.apply(event, point.price)
                if debug:
                    view.trace.append(_trace(event, point.price, point.date, delta, position))
                pending += 1

            tracker.update(position.equity(point.price))
            day += timedelta(days=1)

        if pending < len(events):
            logger.warning("%d backtest events for %s never found a price", len(events) - pending, symbol)

    def _replay_at_current(
        self,
        events: list[BacktestEvent],
        price: float,
        price_date: date,
        position: _Position,
        tracker: DrawdownTracker,
        view: BacktestView,
        debug: bool,
    ) -> None:
        for _, day_events in groupby(events, key=lambda e: e.date):
            for event in day_events:
                delta = position.apply(event, price)
                if debug:
                    view.trace.append(_trace(event, price, price_date, delta, position))
            tracker.update(position.equity(price))

    def _actual_drawdown(
        self,
        ordered: list[Transaction],
        normalizer: CurrencyNormalizer,
    ) -> float:
        """
        Max drawdown of the real portfolio: holdings priced daily plus cash.

        Holdings without any known price are carried at cost.
        """
        tracker = DrawdownTracker()
        if not ordered:
            return tracker.max_drawdown

        ledger = PositionLedger(normalizer)
        reconciler = CashReconciler(normalizer)
        last_price: dict[str, float] = {}
        end = max(self._today(), ordered[-1].date)
        cursor = 0
        day = ordered[0].date

        while day <= end:
            while cursor < len(ordered) and ordered[cursor].date <= day:
                ledger.apply(ordered[cursor])
                reconciler.apply(ordered[cursor])
                cursor += 1

            holdings = 0.0
            for bucket in ledger.held():
                point = self._price_on(bucket.symbol, day, PriceBasis.CLOSE)
                if point is not None:
                    last_price[bucket.symbol] = point.price
                price = last_price.get(bucket.symbol)
                if price is None:
                    holdings += bucket.invested
                    continue
                holdings += (
                    bucket.shares * price * contract_multiplier(bucket.symbol)
                    * normalizer.rate(bucket.currency)
                )

            tracker.update(holdings + reconciler.balance)
            day += timedelta(days=1)

        return tracker.max_drawdown

    def _price_on(self, symbol: str, day: date, basis: PriceBasis):
        try:
            point = self._history.get_price_on_or_before(symbol, day, basis)
        except AppError as e:
            logger.debug("No %s price for %s on %s: %s", basis.value, symbol, day, e.message)
            return None
        if point.price <= 0:
            return None
        return point


def _trace(
    event: BacktestEvent,
    price: float,
    price_date: date,
    shares_delta: float,
    position: _Position,
) -> BacktestTraceEntry:
    return BacktestTraceEntry(
        date=event.date,
        kind=event.kind,
        amount=event.amount,
        price=price,
        price_date=price_date,
        shares_delta=shares_delta,
        running_shares=position.shares,
        running_equity=position.equity(price),
    )
