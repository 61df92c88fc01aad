"""Deterministic chronological ordering of transactions."""

from datetime import date
from typing import Iterable

from stock_portfolios.domain.models import Transaction


def cash_rank(txn: Transaction) -> int:
    """Same-day rank: inflows (0) before zero-delta entries (1) before outflows (2)."""
    delta = txn.signed_cash_amount
    if delta > 0:
        return 0
    if delta == 0:
        return 1
    return 2


def chronological_key(txn: Transaction) -> tuple[date, int, str]:
    return (txn.date, cash_rank(txn), txn.txn_id)


def order_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Return transactions in replay order.

    Date ascending; on the same date cash inflows (sell, dividend, deposit)
    come before outflows (buy, withdrawal); ties fall back to the id.
    """
    return sorted(transactions, key=chronological_key)
