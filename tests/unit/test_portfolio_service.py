"""Unit tests for PortfolioService."""

import pytest

from stock_portfolios.core.exceptions import NotFoundError, ValidationError
from stock_portfolios.services import LedgerService, PortfolioService, TransactionInput

from tests.conftest import FIXED_NOW


class TestPortfolioService:
    """CRUD behaviour."""

    def test_create(self, portfolio_service: PortfolioService):
        portfolio = portfolio_service.create_portfolio("  Retirement ", "twd")

        assert portfolio.portfolio_id == "id-0001"
        assert portfolio.name == "Retirement"
        assert portfolio.base_ccy == "TWD"
        assert portfolio.created_at == FIXED_NOW
        assert portfolio_service.get_portfolio("id-0001") == portfolio

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_required(self, portfolio_service: PortfolioService, name):
        with pytest.raises(ValidationError):
            portfolio_service.create_portfolio(name)

    def test_list(self, portfolio_service: PortfolioService):
        portfolio_service.create_portfolio("A")
        portfolio_service.create_portfolio("B")

        assert [p.name for p in portfolio_service.list_portfolios()] == ["A", "B"]

    def test_update_keeps_created_at(self, portfolio_service: PortfolioService):
        created = portfolio_service.create_portfolio("Old")

        updated = portfolio_service.update_portfolio(created.portfolio_id, "New", "usd")

        assert updated.name == "New"
        assert updated.base_ccy == "USD"
        assert updated.created_at == created.created_at
        assert portfolio_service.get_portfolio(created.portfolio_id).name == "New"

    def test_get_missing(self, portfolio_service: PortfolioService):
        with pytest.raises(NotFoundError):
            portfolio_service.get_portfolio("missing")

    def test_delete_cascades(self, portfolio_service: PortfolioService, ledger_service: LedgerService):
        """
        GIVEN a portfolio with a transaction
        WHEN the portfolio is deleted
        THEN it is gone and its transactions can no longer be listed
        """
        portfolio = portfolio_service.create_portfolio("Temp")
        ledger_service.add_transaction(
            portfolio.portfolio_id,
            TransactionInput(trade_type="cash", date="2024/01/02", currency="USD", total=100),
        )

        portfolio_service.delete_portfolio(portfolio.portfolio_id)

        with pytest.raises(NotFoundError):
            portfolio_service.get_portfolio(portfolio.portfolio_id)
        with pytest.raises(NotFoundError):
            ledger_service.list_transactions(portfolio.portfolio_id)

    def test_delete_missing(self, portfolio_service: PortfolioService):
        with pytest.raises(NotFoundError):
            portfolio_service.delete_portfolio("missing")
