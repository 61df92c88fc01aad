"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from stock_portfolios.domain.models import Portfolio


class PortfolioRequest(BaseModel):
    """Request schema for creating or replacing a portfolio."""

    name: str = Field(default="", max_length=255, description="Display name (required)")
    base_ccy: Optional[str] = Field(default=None, max_length=8, description="Base currency")


class PortfolioResponse(BaseModel):
    """Response schema for a single portfolio."""

    id: str
    name: str
    base_ccy: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, portfolio: Portfolio) -> "PortfolioResponse":
        return cls(
            id=portfolio.portfolio_id,
            name=portfolio.name,
            base_ccy=portfolio.base_ccy,
            created_at=portfolio.created_at,
            updated_at=portfolio.updated_at,
        )
