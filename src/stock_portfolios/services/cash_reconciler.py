"""Cash balance reconstruction with inferred deposits."""

import logging
from dataclasses import replace
from typing import Iterable

from stock_portfolios.domain.models import Transaction
from stock_portfolios.domain.views import CashEvent, CashReconciliation
from stock_portfolios.services.currency import CurrencyNormalizer
from stock_portfolios.services.ordering import order_transactions

logger = logging.getLogger(__name__)


class CashReconciler:
    """
    Replays transactions as a single running cash balance.

    Whenever a transaction would push the balance below zero, the exact
    shortfall is recorded as an inferred deposit first. Net contribution
    (deposits - withdrawals + inferred) is floored at zero on withdrawals,
    and its running maximum is the peak contribution.
    """

    def __init__(self, normalizer: CurrencyNormalizer):
        self._normalizer = normalizer
        self._state = CashReconciliation(ref_currency=normalizer.ref_currency)
        self._balance = 0.0
        self._contribution = 0.0

    @classmethod
    def fold(
        cls,
        transactions: Iterable[Transaction],
        normalizer: CurrencyNormalizer,
    ) -> CashReconciliation:
        reconciler = cls(normalizer)
        for txn in order_transactions(transactions):
            reconciler.apply(txn)
        return reconciler.result()

    @property
    def balance(self) -> float:
        return self._balance

    def apply(self, txn: Transaction) -> float:
        """Apply one transaction; returns the inferred deposit injected (0 if none)."""
        state = self._state
        delta = float(txn.signed_cash_amount) * self._normalizer.rate(txn.currency)

        inferred = 0.0
        if self._balance + delta < 0:
            inferred = -(self._balance + delta)
            state.inferred += inferred
            state.inferred_events.append(CashEvent(date=txn.date, amount=inferred))
            self._contribution += inferred
            state.peak_contribution = max(state.peak_contribution, self._contribution)
            # shortfall covered exactly
            self._balance = 0.0
            logger.debug("Inferred deposit %.2f on %s before %s", inferred, txn.date, txn.txn_id)
        else:
            self._balance += delta

        if txn.is_cash:
            if delta > 0:
                state.deposits += delta
                state.deposit_events.append(CashEvent(date=txn.date, amount=delta))
                self._contribution += delta
            elif delta < 0:
                state.withdrawals += -delta
                state.withdrawal_events.append(CashEvent(date=txn.date, amount=-delta))
                self._contribution = max(0.0, self._contribution + delta)
            state.peak_contribution = max(state.peak_contribution, self._contribution)

        state.min_balance = min(state.min_balance, self._balance)
        return inferred

    def result(self) -> CashReconciliation:
        """Snapshot of the reconciliation so far."""
        return replace(
            self._state,
            ending_balance=self._balance,
            deposit_events=list(self._state.deposit_events),
            withdrawal_events=list(self._state.withdrawal_events),
            inferred_events=list(self._state.inferred_events),
        )
