"""Portfolio CRUD service."""

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from stock_portfolios.core.exceptions import ValidationError
from stock_portfolios.core.timezone import now_local
from stock_portfolios.domain.models import Portfolio
from stock_portfolios.repositories.protocols import PortfolioRepository


def new_id() -> str:
    return str(uuid.uuid4())


class PortfolioService:
    """Creates, renames and removes portfolios."""

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = now_local,
    ):
        self._portfolio_repo = portfolio_repo
        self._id_factory = id_factory
        self._clock = clock

    def create_portfolio(self, name: str, base_ccy: Optional[str] = None) -> Portfolio:
        """
        Create a new portfolio.

        Args:
            name: Display name (required, trimmed)
            base_ccy: Optional base currency, upper-cased

        Returns:
            Created Portfolio instance
        """
        clean_name = self._validate_name(name)
        now = self._clock()
        portfolio = Portfolio(
            portfolio_id=self._id_factory(),
            name=clean_name,
            base_ccy=(base_ccy or "").strip().upper(),
            created_at=now,
            updated_at=now,
        )
        return self._portfolio_repo.create(portfolio)

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """Get portfolio by ID; raises NotFoundError."""
        return self._portfolio_repo.get_by_id(portfolio_id)

    def list_portfolios(self) -> list[Portfolio]:
        """List all portfolios."""
        return self._portfolio_repo.list_all()

    def update_portfolio(
        self,
        portfolio_id: str,
        name: str,
        base_ccy: Optional[str] = None,
    ) -> Portfolio:
        """Replace name and base currency; created_at is kept."""
        existing = self._portfolio_repo.get_by_id(portfolio_id)
        updated = replace(
            existing,
            name=self._validate_name(name),
            base_ccy=(base_ccy or "").strip().upper(),
            updated_at=self._clock(),
        )
        return self._portfolio_repo.update(updated)

    def delete_portfolio(self, portfolio_id: str) -> None:
        """Delete a portfolio and all of its transactions."""
        self._portfolio_repo.delete(portfolio_id)

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("name is required")
        return clean
