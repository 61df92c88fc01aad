"""Analytics endpoints: across all portfolios and per portfolio."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from stock_portfolios.api.deps import get_analytics_service
from stock_portfolios.api.schemas import (
    AllocationResponse,
    BacktestResponse,
    CashResponse,
    SummaryResponse,
)
from stock_portfolios.services import AnalyticsService

router = APIRouter(tags=["analytics"])

_REF_QUERY = Query(None, description="Reference currency override (e.g. TWD, USD)")


def _allocations(analytics, basis, ref_ccy, portfolio_id=None) -> AllocationResponse:
    view = analytics.allocations(basis=basis, portfolio_id=portfolio_id, ref_currency=ref_ccy)
    return AllocationResponse.model_validate(view)


def _summary(analytics, ref_ccy, portfolio_id=None) -> SummaryResponse:
    view = analytics.summary(portfolio_id=portfolio_id, ref_currency=ref_ccy)
    return SummaryResponse.model_validate(view)


def _cash(analytics, ref_ccy, portfolio_id=None) -> CashResponse:
    view = analytics.cash(portfolio_id=portfolio_id, ref_currency=ref_ccy)
    return CashResponse.model_validate(view)


def _backtest(analytics, symbol, symbol_ccy, price_basis, debug, ref_ccy, portfolio_id=None) -> BacktestResponse:
    view = analytics.backtest(
        symbol,
        currency=symbol_ccy,
        price_basis=price_basis,
        debug=debug,
        portfolio_id=portfolio_id,
        ref_currency=ref_ccy,
    )
    return BacktestResponse.model_validate(view)


@router.get("/allocations", response_model=AllocationResponse)
def get_allocations(
    basis: Optional[str] = Query("invested", description="invested or market_value"),
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> AllocationResponse:
    """Allocation breakdown across all portfolios."""
    return _allocations(analytics, basis, ref_ccy)


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> SummaryResponse:
    """Unrealized, daily and cash-adjusted P/L across all portfolios."""
    return _summary(analytics, ref_ccy)


@router.get("/cash", response_model=CashResponse)
def get_cash(
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> CashResponse:
    return _cash(analytics, ref_ccy)


@router.get("/backtest", response_model=BacktestResponse)
def get_backtest(
    symbol: str = Query(..., description="Alternate instrument"),
    symbol_ccy: Optional[str] = Query(None, description="Quote currency of the instrument (default USD)"),
    price_basis: Optional[str] = Query("close", description="open or close"),
    debug: bool = Query(False),
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> BacktestResponse:
    """Replay all portfolios' cash flows into one alternate instrument."""
    return _backtest(analytics, symbol, symbol_ccy, price_basis, debug, ref_ccy)


@router.get("/portfolios/{portfolio_id}/allocations", response_model=AllocationResponse)
def get_portfolio_allocations(
    portfolio_id: str,
    basis: Optional[str] = Query("invested", description="invested or market_value"),
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> AllocationResponse:
    return _allocations(analytics, basis, ref_ccy, portfolio_id)


@router.get("/portfolios/{portfolio_id}/summary", response_model=SummaryResponse)
def get_portfolio_summary(
    portfolio_id: str,
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> SummaryResponse:
    return _summary(analytics, ref_ccy, portfolio_id)


@router.get("/portfolios/{portfolio_id}/cash", response_model=CashResponse)
def get_portfolio_cash(
    portfolio_id: str,
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> CashResponse:
    return _cash(analytics, ref_ccy, portfolio_id)


@router.get("/portfolios/{portfolio_id}/backtest", response_model=BacktestResponse)
def get_portfolio_backtest(
    portfolio_id: str,
    symbol: str = Query(..., description="Alternate instrument"),
    symbol_ccy: Optional[str] = Query(None, description="Quote currency of the instrument (default USD)"),
    price_basis: Optional[str] = Query("close", description="open or close"),
    debug: bool = Query(False),
    ref_ccy: Optional[str] = _REF_QUERY,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> BacktestResponse:
    return _backtest(analytics, symbol, symbol_ccy, price_basis, debug, ref_ccy, portfolio_id)
