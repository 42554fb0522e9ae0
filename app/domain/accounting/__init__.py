"""Accounting domain module."""

from .enums import (
    AccountType,
    BalanceType,
    Currency,
    JournalStatus,
)
from .errors import (
    LedgerError,
    ImbalancedEntry,
    InvalidLineInput,
    InvalidExchangeRate,
    ConstraintViolation,
    CodeSpaceExhausted,
    AlreadyVoided,
    AccountNotFound,
    JournalEntryNotFound,
    ConcurrencyConflict,
)

__all__ = [
    "AccountType",
    "BalanceType",
    "Currency",
    "JournalStatus",
    "LedgerError",
    "ImbalancedEntry",
    "InvalidLineInput",
    "InvalidExchangeRate",
    "ConstraintViolation",
    "CodeSpaceExhausted",
    "AlreadyVoided",
    "AccountNotFound",
    "JournalEntryNotFound",
    "ConcurrencyConflict",
]
