"""Ledger service for transaction management."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Union

from stock_portfolios.core.exceptions import ValidationError
from stock_portfolios.core.timezone import now_local, parse_trade_date
from stock_portfolios.domain.models import Transaction, TradeType, to_decimal
from stock_portfolios.repositories.protocols import (
    ListFilter,
    PortfolioRepository,
    TransactionRepository,
    SORT_OPTIONS,
)
from stock_portfolios.services.portfolio_service import new_id

# Accepted spellings of each trade type
_TRADE_TYPE_ALIASES = {
    "buy": TradeType.BUY,
    "purchase": TradeType.BUY,
    "sell": TradeType.SELL,
    "dividend": TradeType.DIVIDEND,
    "cash": TradeType.CASH,
}


@dataclass
class TransactionInput:
    """Raw transaction fields as received from a caller."""

    trade_type: str
    date: Union[str, date, datetime]
    currency: str
    symbol: str = ""
    shares: Union[Decimal, float] = Decimal("0")
    price: Union[Decimal, float] = Decimal("0")
    fee: Union[Decimal, float] = Decimal("0")
    total: Union[Decimal, float] = Decimal("0")


def parse_trade_type(value: Union[str, TradeType, None]) -> TradeType:
    text = (value.value if isinstance(value, TradeType) else (value or "")).strip().lower()
    if not text:
        raise ValidationError("trade_type is required")
    trade_type = _TRADE_TYPE_ALIASES.get(text)
    if trade_type is None:
        raise ValidationError(
            f"unsupported trade_type: {value!r} (use buy|purchase|sell|dividend|cash)"
        )
    return trade_type


class LedgerService:
    """
    Service for managing the transaction ledger of each portfolio.

    All writes go through validation; batches are validated in full before
    anything is stored.
    """

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        transaction_repo: TransactionRepository,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = now_local,
    ):
        self._portfolio_repo = portfolio_repo
        self._transaction_repo = transaction_repo
        self._id_factory = id_factory
        self._clock = clock

    def add_transaction(self, portfolio_id: str, data: TransactionInput) -> Transaction:
        """Validate and store one transaction."""
        self._portfolio_repo.get_by_id(portfolio_id)
        now = self._clock()
        transaction = self._build(portfolio_id, data, self._id_factory(), now, now)
        return self._transaction_repo.create(portfolio_id, transaction)

    def add_transactions(self, portfolio_id: str, items: list[TransactionInput]) -> list[Transaction]:
        """Validate every item, then store them together."""
        self._portfolio_repo.get_by_id(portfolio_id)
        now = self._clock()
        transactions = []
        for index, data in enumerate(items):
            try:
                transactions.append(self._build(portfolio_id, data, self._id_factory(), now, now))
            except ValidationError as e:
                raise ValidationError(f"item {index}: {e.message}")
        return self._transaction_repo.create_batch(portfolio_id, transactions)

    def get_transaction(self, portfolio_id: str, txn_id: str) -> Transaction:
        return self._transaction_repo.get_by_id(portfolio_id, txn_id)

    def list_transactions(
        self,
        portfolio_id: str,
        filter: Optional[ListFilter] = None,
    ) -> list[Transaction]:
        """List a portfolio's transactions; raises NotFoundError for an unknown portfolio."""
        filter = filter or ListFilter()
        if filter.sort and filter.sort not in SORT_OPTIONS:
            raise ValidationError('unsupported sort (use "date_asc" or "date_desc")')
        if filter.limit < 0 or filter.offset < 0:
            raise ValidationError("limit and offset must be >= 0")
        return self._transaction_repo.list(portfolio_id, filter)

    def update_transaction(
        self,
        portfolio_id: str,
        txn_id: str,
        data: TransactionInput,
    ) -> Transaction:
        """Replace a transaction's fields; id and created_at are kept."""
        existing = self._transaction_repo.get_by_id(portfolio_id, txn_id)
        transaction = self._build(
            portfolio_id, data, existing.txn_id, existing.created_at, self._clock()
        )
        return self._transaction_repo.update(portfolio_id, transaction)

    def delete_transaction(self, portfolio_id: str, txn_id: str) -> None:
        self._transaction_repo.delete(portfolio_id, txn_id)

    def _build(
        self,
        portfolio_id: str,
        data: TransactionInput,
        txn_id: str,
        created_at: Optional[datetime],
        updated_at: Optional[datetime],
    ) -> Transaction:
        trade_type = parse_trade_type(data.trade_type)
        trade_date = parse_trade_date(data.date)

        symbol = (data.symbol or "").strip().upper()
        currency = (data.currency or "").strip().upper()
        if not currency:
            raise ValidationError("currency is required")
        if not symbol and trade_type != TradeType.CASH:
            raise ValidationError(f"symbol is required for {trade_type.value}")

        try:
            shares, price, fee, total = (
                to_decimal(v) for v in (data.shares, data.price, data.fee, data.total)
            )
        except InvalidOperation:
            raise ValidationError("shares, price, fee, and total must be numbers")
        if not all(v.is_finite() for v in (shares, price, fee, total)):
            raise ValidationError("shares, price, fee, and total must be finite")
        if shares < 0 or price < 0 or fee < 0:
            raise ValidationError("shares, price, and fee must be >= 0")

        return Transaction(
            txn_id=txn_id,
            portfolio_id=portfolio_id,
            trade_type=trade_type,
            date=trade_date,
            currency=currency,
            total=total,
            symbol=symbol,
            shares=shares,
            price=price,
            fee=fee,
            created_at=created_at,
            updated_at=updated_at,
        )
