"""Transaction repository protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol

from stock_portfolios.domain.models import Transaction

SORT_DATE_ASC = "date_asc"
SORT_DATE_DESC = "date_desc"
SORT_OPTIONS = (SORT_DATE_ASC, SORT_DATE_DESC)


@dataclass
class ListFilter:
    """Listing options; limit=0 means unlimited, symbol match is case-insensitive."""

    symbol: Optional[str] = None
    limit: int = 0
    offset: int = 0
    sort: Optional[str] = None  # "date_asc" | "date_desc" | None


class TransactionRepository(Protocol):
    """Interface for transaction (ledger) data access."""

    def create(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def create_batch(self, portfolio_id: str, transactions: list[Transaction]) -> list[Transaction]:
        """Persist several transactions at once."""
        ...

    def get_by_id(self, portfolio_id: str, txn_id: str) -> Transaction:
        """Retrieve transaction by ID; raises NotFoundError."""
        ...

    def list(self, portfolio_id: str, filter: Optional[ListFilter] = None) -> list[Transaction]:
        """List transactions for a portfolio."""
        ...

    def update(self, portfolio_id: str, transaction: Transaction) -> Transaction:
        """Replace an existing transaction; raises NotFoundError."""
        ...

    def delete(self, portfolio_id: str, txn_id: str) -> None:
        """Delete a transaction; raises NotFoundError."""
        ...
