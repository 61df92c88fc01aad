"""Portfolio CRUD endpoints."""

from fastapi import APIRouter, Depends, Response

from stock_portfolios.api.deps import get_portfolio_service
from stock_portfolios.api.schemas import PortfolioRequest, PortfolioResponse
from stock_portfolios.services import PortfolioService

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


@router.post("", response_model=PortfolioResponse, status_code=201)
def create_portfolio(
    data: PortfolioRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Create a new portfolio."""
    portfolio = service.create_portfolio(name=data.name, base_ccy=data.base_ccy)
    return PortfolioResponse.from_domain(portfolio)


@router.get("", response_model=list[PortfolioResponse])
def list_portfolios(
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[PortfolioResponse]:
    """List all portfolios."""
    return [PortfolioResponse.from_domain(p) for p in service.list_portfolios()]


@router.get("/{portfolio_id}", response_model=PortfolioResponse)
def get_portfolio(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    return PortfolioResponse.from_domain(service.get_portfolio(portfolio_id))


@router.put("/{portfolio_id}", response_model=PortfolioResponse)
def update_portfolio(
    portfolio_id: str,
    data: PortfolioRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Replace a portfolio's name and base currency."""
    portfolio = service.update_portfolio(portfolio_id, name=data.name, base_ccy=data.base_ccy)
    return PortfolioResponse.from_domain(portfolio)


@router.delete("/{portfolio_id}", status_code=204)
def delete_portfolio(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    """Delete a portfolio together with its transactions."""
    service.delete_portfolio(portfolio_id)
    return Response(status_code=204)
