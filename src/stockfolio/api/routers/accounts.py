"""Account management endpoints."""

from fastapi import APIRouter, Depends, Response

from stockfolio.api.deps import get_registry
from stockfolio.api.schemas import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountListResponse,
)
from stockfolio.domain.models import Account
from stockfolio.services import AccountRegistry

router = APIRouter(prefix="/accounts", tags=["accounts"])


def to_account_response(account: Account, active_id: str) -> AccountResponse:
    return AccountResponse(
        id=account.id,
        name=account.name,
        cash=account.cash,
        is_active=account.id == active_id,
    )


@router.get("", response_model=AccountListResponse)
def list_accounts(registry: AccountRegistry = Depends(get_registry)) -> AccountListResponse:
    """List all accounts in registry order."""
    active_id = registry.get_active_account().id
    accounts = registry.list_accounts()
    return AccountListResponse(
        accounts=[to_account_response(a, active_id) for a in accounts],
        active_account_id=active_id,
        count=len(accounts),
    )


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    data: AccountCreate,
    registry: AccountRegistry = Depends(get_registry),
) -> AccountResponse:
    """Create a new account. The active account does not change."""
    account = registry.create_account(data.name, cash=data.cash)
    return to_account_response(account, registry.get_active_account().id)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    data: AccountUpdate,
    registry: AccountRegistry = Depends(get_registry),
) -> AccountResponse:
    """Rename an account and/or overwrite its trading cash."""
    account = registry.update_account(account_id, name=data.name, cash=data.cash)
    return to_account_response(account, registry.get_active_account().id)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    registry: AccountRegistry = Depends(get_registry),
) -> Response:
    """Delete an account and its transactions. The last account cannot be deleted."""
    registry.delete_account(account_id)
    return Response(status_code=204)


@router.post("/{account_id}/activate", response_model=AccountResponse)
def activate_account(
    account_id: str,
    registry: AccountRegistry = Depends(get_registry),
) -> AccountResponse:
    """Switch the active account."""
    account = registry.switch_account(account_id)
    return to_account_response(account, account.id)
