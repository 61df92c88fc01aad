"""Core utilities and shared functionality."""

from stock_portfolios.core.timezone import (
    now_local,
    today_local,
    parse_trade_date,
    DEFAULT_TZ,
)
from stock_portfolios.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    PriceNotFoundError,
    DependencyUnavailableError,
)

__all__ = [
    "now_local",
    "today_local",
    "parse_trade_date",
    "DEFAULT_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "PriceNotFoundError",
    "DependencyUnavailableError",
]
