"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from stock_portfolios.domain.models.enums import TradeType

MONEY_FIELDS = ("total", "shares", "price", "fee")


def to_decimal(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Convert a numeric value to Decimal via its text form (0.1 stays 0.1)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Transaction:
    """
    Ledger transaction entry (immutable once created).

    Supports: buy, sell, dividend, cash.
    - buy/sell/dividend carry a symbol; cash has an empty symbol
    - total is the signed cash effect in the transaction's own currency;
      for buy/sell/dividend only |total| is used, the kind gives the sign
    - for cash, the sign of total is the only deposit/withdrawal signal
    - money and share fields are Decimal; analytics convert to float when folding
    """

    txn_id: str
    portfolio_id: str
    trade_type: TradeType
    date: date
    currency: str
    total: Decimal
    symbol: str = ""
    shares: Decimal = Decimal("0")
    price: Decimal = Decimal("0")
    fee: Decimal = Decimal("0")
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.trade_type, str) and not isinstance(self.trade_type, TradeType):
            object.__setattr__(self, "trade_type", TradeType(self.trade_type.lower()))
        for name in MONEY_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @property
    def is_cash(self) -> bool:
        """Return True for a deposit/withdrawal entry."""
        return self.trade_type == TradeType.CASH

    @property
    def signed_cash_amount(self) -> Decimal:
        """
        Cash effect of this transaction in its own currency.

        Positive = cash in (sell, dividend, deposit), negative = cash out
        (buy, withdrawal).
        """
        if self.trade_type == TradeType.BUY:
            return -abs(self.total)
        if self.trade_type in (TradeType.SELL, TradeType.DIVIDEND):
            return abs(self.total)
        return self.total
