"""Pydantic schemas for API requests and responses."""

from .accounts import (
    AccountCreate,
    AccountUpdateRequest,
    AccountResponse,
    AccountDetailResponse,
    AccountTreeNodeResponse,
    DeleteAccountResponse,
)
from .journal import (
    JournalLineCreate,
    JournalEntryCreate,
    JournalEntryResponse,
    JournalEntryDetailResponse,
    JournalEntryListResponse,
    VoidJournalEntryResponse,
)
from .exchange_rate import (
    ExchangeRateResponse,
    ExchangeRateUpdate,
)

__all__ = [
    "AccountCreate",
    "AccountUpdateRequest",
    "AccountResponse",
    "AccountDetailResponse",
    "AccountTreeNodeResponse",
    "DeleteAccountResponse",
    "JournalLineCreate",
    "JournalEntryCreate",
    "JournalEntryResponse",
    "JournalEntryDetailResponse",
    "JournalEntryListResponse",
    "VoidJournalEntryResponse",
    "ExchangeRateResponse",
    "ExchangeRateUpdate",
]
