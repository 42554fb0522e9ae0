"""Journal entry schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.accounting.enums import BalanceType, Currency, JournalStatus


class JournalLineCreate(BaseModel):
    """
    One proposed line.

    Structural rules (account and currency present, exactly one positive
    amount) are enforced by the ledger so the error carries its kind.
    """
    account_id: Optional[UUID] = None
    debit_amount: Decimal = Field(default=Decimal("0"))
    credit_amount: Decimal = Field(default=Decimal("0"))
    currency: Optional[Currency] = None
    description: Optional[str] = Field(default=None, max_length=500)


# Module-level alias: a field named "date" would shadow the type in its own default
EntryDate = Optional[date]


class JournalEntryCreate(BaseModel):
    """Schema for creating or editing a journal entry. ``date`` defaults to today."""
    date: EntryDate = None
    description: str = Field(..., max_length=500)
    reference: Optional[str] = Field(default=None, max_length=100)
    lines: List[JournalLineCreate]


class AccountSummary(BaseModel):
    id: UUID
    code: str
    name: str
    currency: Currency

    class Config:
        from_attributes = True


class JournalLineResponse(BaseModel):
    id: UUID
    line_number: int
    account_id: UUID
    account: Optional[AccountSummary] = None
    debit_amount: Decimal
    credit_amount: Decimal
    currency: Currency
    exchange_rate: Decimal
    converted_amount_jod: Decimal
    description: Optional[str] = None

    class Config:
        from_attributes = True


class LedgerTransactionResponse(BaseModel):
    id: UUID
    account_id: UUID
    posting_order: int
    date: date
    amount: Decimal
    type: BalanceType
    currency: Currency
    exchange_rate: Decimal
    balance_before: Decimal
    balance_after: Decimal
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class JournalEntryResponse(BaseModel):
    """Schema for journal entry response."""
    id: UUID
    entry_number: int
    date: date
    description: str
    reference: Optional[str] = None
    status: JournalStatus
    total_debits_jod: Decimal
    total_credits_jod: Decimal
    total_debits_usdt: Decimal
    total_credits_usdt: Decimal
    created_by: str
    created_at: datetime
    updated_at: datetime
    voided_at: Optional[datetime] = None
    lines: List[JournalLineResponse] = []

    class Config:
        from_attributes = True


class JournalEntryDetailResponse(JournalEntryResponse):
    """Journal entry with its posting ledger rows."""
    transactions: List[LedgerTransactionResponse] = []


class JournalEntryListResponse(BaseModel):
    entries: List[JournalEntryResponse]
    total: int
    page: int
    total_pages: int


class VoidJournalEntryResponse(BaseModel):
    success: bool
