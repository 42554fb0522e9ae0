"""Chart of accounts schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.accounting.enums import AccountType, BalanceType, Currency


class AccountCreate(BaseModel):
    """Schema for creating an account. The code is assigned by the ledger."""
    name: str = Field(..., min_length=1, max_length=200)
    account_type: AccountType
    is_parent: bool = False
    currency: Currency = Currency.JOD
    parent_id: Optional[UUID] = None
    opening_balance: Decimal = Field(default=Decimal("0"), ge=0)
    opening_balance_type: Optional[BalanceType] = None


class AccountUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    currency: Optional[Currency] = None
    opening_balance: Optional[Decimal] = Field(default=None, ge=0)
    opening_balance_type: Optional[BalanceType] = None


class AccountResponse(BaseModel):
    """Schema for account response."""
    id: UUID
    code: str
    name: str
    account_type: AccountType
    is_parent: bool
    currency: Currency
    normal_balance: BalanceType
    opening_balance: Decimal
    opening_balance_type: Optional[BalanceType] = None
    current_balance: Decimal
    has_transactions: bool
    parent_id: Optional[UUID] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AccountDetailResponse(AccountResponse):
    parent: Optional[AccountResponse] = None
    children: List[AccountResponse] = []


class AccountTreeNodeResponse(BaseModel):
    account: AccountResponse
    level: int
    is_expanded: bool = False
    children: List["AccountTreeNodeResponse"] = []

    class Config:
        from_attributes = True


class DeleteAccountResponse(BaseModel):
    success: bool
