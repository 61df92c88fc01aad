"""SQLAlchemy implementation of PortfolioRepository."""

from sqlalchemy.orm import Session

from stock_portfolios.core.exceptions import NotFoundError
from stock_portfolios.domain.models import Portfolio
from stock_portfolios.repositories.sqlalchemy.orm_models import PortfolioORM


class SqlAlchemyPortfolioRepository:
    """SQLAlchemy-backed portfolio repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        orm_portfolio = PortfolioORM(
            portfolio_id=portfolio.portfolio_id,
            name=portfolio.name,
            base_ccy=portfolio.base_ccy,
            created_at=portfolio.created_at,
            updated_at=portfolio.updated_at,
        )
        self._db.add(orm_portfolio)
        self._db.commit()
        self._db.refresh(orm_portfolio)
        return self._to_domain(orm_portfolio)

    def get_by_id(self, portfolio_id: str) -> Portfolio:
        """Retrieve portfolio by ID."""
        return self._to_domain(self._get_orm(portfolio_id))

    def list_all(self) -> list[Portfolio]:
        """List all portfolios."""
        orm_portfolios = self._db.query(PortfolioORM).order_by(
            PortfolioORM.created_at, PortfolioORM.portfolio_id
        ).all()
        return [self._to_domain(p) for p in orm_portfolios]

    def update(self, portfolio: Portfolio) -> Portfolio:
        """Update an existing portfolio."""
        orm_portfolio = self._get_orm(portfolio.portfolio_id)
        orm_portfolio.name = portfolio.name
        orm_portfolio.base_ccy = portfolio.base_ccy
        orm_portfolio.updated_at = portfolio.updated_at
        self._db.commit()
        self._db.refresh(orm_portfolio)
        return self._to_domain(orm_portfolio)

    def delete(self, portfolio_id: str) -> None:
        """Delete a portfolio together with its transactions."""
        orm_portfolio = self._get_orm(portfolio_id)
        self._db.delete(orm_portfolio)
        self._db.commit()

    def _get_orm(self, portfolio_id: str) -> PortfolioORM:
        orm_portfolio = self._db.query(PortfolioORM).filter(
            PortfolioORM.portfolio_id == portfolio_id
        ).first()
        if orm_portfolio is None:
            raise NotFoundError("Portfolio", portfolio_id)
        return orm_portfolio

    @staticmethod
    def _to_domain(orm: PortfolioORM) -> Portfolio:
        """Convert ORM model to domain model."""
        return Portfolio(
            portfolio_id=orm.portfolio_id,
            name=orm.name,
            base_ccy=orm.base_ccy or "",
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
