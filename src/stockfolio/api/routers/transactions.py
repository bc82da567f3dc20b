"""Transaction ledger endpoints (active account)."""

from fastapi import APIRouter, Depends, Response

from stockfolio.api.deps import get_registry
from stockfolio.api.schemas import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from stockfolio.domain.models import Transaction
from stockfolio.services import AccountRegistry, TransactionCreate, TransactionUpdate

router = APIRouter(prefix="/transactions", tags=["transactions"])


def to_transaction_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        ticker=txn.ticker,
        company_name=txn.company_name,
        type=txn.type,
        shares=txn.shares,
        price=txn.price,
        date=txn.date,
        notes=txn.notes,
    )


@router.get("", response_model=TransactionListResponse)
def list_transactions(registry: AccountRegistry = Depends(get_registry)) -> TransactionListResponse:
    """List the active account's ledger in stored order (newest first after adds)."""
    account = registry.get_active_account()
    transactions = registry.active_transactions()
    return TransactionListResponse(
        account_id=account.id,
        transactions=[to_transaction_response(t) for t in transactions],
        count=len(transactions),
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreateRequest,
    registry: AccountRegistry = Depends(get_registry),
) -> TransactionResponse:
    """Record a BUY or SELL; the active account's cash is adjusted."""
    txn = registry.add_transaction(
        TransactionCreate(
            ticker=data.ticker,
            type=data.type,
            shares=data.shares,
            price=data.price,
            date=data.date,
            notes=data.notes,
        )
    )
    return to_transaction_response(txn)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    data: TransactionUpdateRequest,
    registry: AccountRegistry = Depends(get_registry),
) -> TransactionResponse:
    """Edit a transaction in place. Cash is not adjusted."""
    txn = registry.update_transaction(
        transaction_id,
        TransactionUpdate(
            ticker=data.ticker,
            type=data.type,
            shares=data.shares,
            price=data.price,
            date=data.date,
            notes=data.notes,
        ),
    )
    return to_transaction_response(txn)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    registry: AccountRegistry = Depends(get_registry),
) -> Response:
    """Delete a transaction and reverse its cash adjustment."""
    registry.delete_transaction(transaction_id)
    return Response(status_code=204)
