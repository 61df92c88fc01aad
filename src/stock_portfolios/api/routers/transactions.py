"""Transaction endpoints nested under a portfolio."""

from typing import Optional, Union

from fastapi import APIRouter, Body, Depends, Query, Response

from stock_portfolios.api.deps import get_ledger_service
from stock_portfolios.api.schemas import TransactionRequest, TransactionResponse
from stock_portfolios.repositories.protocols import ListFilter
from stock_portfolios.services import LedgerService

router = APIRouter(prefix="/portfolios/{portfolio_id}/transactions", tags=["transactions"])


@router.post(
    "",
    response_model=Union[list[TransactionResponse], TransactionResponse],
    status_code=201,
)
def create_transactions(
    portfolio_id: str,
    payload: Union[list[TransactionRequest], TransactionRequest] = Body(...),
    service: LedgerService = Depends(get_ledger_service),
) -> Union[list[TransactionResponse], TransactionResponse]:
    """
    Create one transaction (object body) or a batch (array body).

    A batch is validated in full before anything is stored.
    """
    if isinstance(payload, list):
        created = service.add_transactions(portfolio_id, [item.to_input() for item in payload])
        return [TransactionResponse.from_domain(t) for t in created]
    return TransactionResponse.from_domain(service.add_transaction(portfolio_id, payload.to_input()))


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    portfolio_id: str,
    symbol: Optional[str] = Query(None, description="Case-insensitive symbol filter"),
    limit: int = Query(50, description="Max items; 0 for all"),
    offset: int = Query(0),
    sort: Optional[str] = Query(None, description="date_asc or date_desc"),
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    """List a portfolio's transactions."""
    filter = ListFilter(symbol=symbol or None, limit=limit, offset=offset, sort=sort or None)
    return [TransactionResponse.from_domain(t) for t in service.list_transactions(portfolio_id, filter)]


@router.get("/{txn_id}", response_model=TransactionResponse)
def get_transaction(
    portfolio_id: str,
    txn_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    return TransactionResponse.from_domain(service.get_transaction(portfolio_id, txn_id))


@router.put("/{txn_id}", response_model=TransactionResponse)
def update_transaction(
    portfolio_id: str,
    txn_id: str,
    data: TransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    """Replace an existing transaction."""
    txn = service.update_transaction(portfolio_id, txn_id, data.to_input())
    return TransactionResponse.from_domain(txn)


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(
    portfolio_id: str,
    txn_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> Response:
    service.delete_transaction(portfolio_id, txn_id)
    return Response(status_code=204)
