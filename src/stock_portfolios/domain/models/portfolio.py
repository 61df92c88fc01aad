"""Portfolio domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Portfolio:
    """
    Named container of transactions.

    Analytics run on a single portfolio or on the union across all of them.
    """

    portfolio_id: str
    name: str
    base_ccy: str = ""
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
