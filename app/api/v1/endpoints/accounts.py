"""Chart of accounts API endpoints."""

from typing import List, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_actor
from app.db.dependencies import get_db
from app.domain.accounting.enums import AccountType
from app.domain.accounting.account_service import (
    create_account,
    update_account,
    delete_account,
    get_account,
    list_accounts,
)
from app.domain.accounting.account_tree import get_account_tree
from app.domain.accounting.inputs import AccountInput, AccountUpdate
from app.schemas.accounts import (
    AccountCreate,
    AccountUpdateRequest,
    AccountResponse,
    AccountDetailResponse,
    AccountTreeNodeResponse,
    DeleteAccountResponse,
)

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[AccountResponse])
def list_accounts_endpoint(
    account_type: Optional[AccountType] = Query(None, alias="type", description="Filter by account type"),
    parent_only: bool = Query(False, description="Only parent accounts"),
    db: Session = Depends(get_db),
) -> List[AccountResponse]:
    """List accounts ordered by type and code."""
    accounts = list_accounts(db, account_type=account_type, parent_only=parent_only)
    return [AccountResponse.model_validate(account) for account in accounts]


@router.get("/tree", response_model=List[AccountTreeNodeResponse])
def account_tree_endpoint(
    search: Optional[str] = Query(None, description="Filter by code or name"),
    db: Session = Depends(get_db),
) -> List[AccountTreeNodeResponse]:
    """Chart of accounts as a forest ordered by code."""
    return [AccountTreeNodeResponse.model_validate(node) for node in get_account_tree(db, search)]


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account_endpoint(
    payload: AccountCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> AccountResponse:
    """
    Create an account.

    The code is assigned from the account type's range: round hundreds for
    parent accounts, the next free number after the parent for leaves.
    """
    account = create_account(
        db,
        AccountInput(
            name=payload.name,
            account_type=payload.account_type,
            is_parent=payload.is_parent,
            currency=payload.currency,
            parent_id=payload.parent_id,
            opening_balance=payload.opening_balance,
            opening_balance_type=payload.opening_balance_type,
            created_by=actor,
        ),
    )
    logger.info("Account created", code=account.code, actor=actor)
    return AccountResponse.model_validate(account)


@router.get("/{account_id}", response_model=AccountDetailResponse)
def get_account_endpoint(
    account_id: UUID,
    db: Session = Depends(get_db),
) -> AccountDetailResponse:
    return AccountDetailResponse.model_validate(get_account(db, account_id))


@router.put("/{account_id}", response_model=AccountResponse)
def update_account_endpoint(
    account_id: UUID,
    payload: AccountUpdateRequest,
    db: Session = Depends(get_db),
) -> AccountResponse:
    """Update an account. The opening balance is frozen once the account has transactions."""
    account = update_account(
        db,
        account_id,
        AccountUpdate(
            name=payload.name,
            currency=payload.currency,
            opening_balance=payload.opening_balance,
            opening_balance_type=payload.opening_balance_type,
        ),
    )
    return AccountResponse.model_validate(account)


@router.delete("/{account_id}", response_model=DeleteAccountResponse)
def delete_account_endpoint(
    account_id: UUID,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> DeleteAccountResponse:
    """Delete an account without transactions or children."""
    delete_account(db, account_id)
    logger.info("Account deleted", account_id=str(account_id), actor=actor)
    return DeleteAccountResponse(success=True)
