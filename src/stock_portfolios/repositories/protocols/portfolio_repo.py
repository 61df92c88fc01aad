"""Portfolio repository protocol."""

from typing import Protocol

from stock_portfolios.domain.models import Portfolio


class PortfolioRepository(Protocol):
    """Interface for portfolio data access."""

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        ...

    def get_by_id(self, portfolio_id: str) -> Portfolio:
        """Retrieve portfolio by ID; raises NotFoundError."""
        ...

    def list_all(self) -> list[Portfolio]:
        """List all portfolios."""
        ...

    def update(self, portfolio: Portfolio) -> Portfolio:
        """Update an existing portfolio; raises NotFoundError."""
        ...

    def delete(self, portfolio_id: str) -> None:
        """Delete a portfolio and its transactions; raises NotFoundError."""
        ...
