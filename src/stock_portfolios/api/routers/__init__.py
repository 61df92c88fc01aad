"""API routers package."""

from stock_portfolios.api.routers.portfolios import router as portfolios_router
from stock_portfolios.api.routers.transactions import router as transactions_router
from stock_portfolios.api.routers.analytics import router as analytics_router

__all__ = [
    "portfolios_router",
    "transactions_router",
    "analytics_router",
]
