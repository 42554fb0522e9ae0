"""Database models."""

from .base import Base
from .accounting import (
    Account,
    ExchangeRate,
    JournalEntry,
    JournalLine,
    LedgerSequence,
    LedgerTransaction,
)

__all__ = [
    "Base",
    "Account",
    "ExchangeRate",
    "JournalEntry",
    "JournalLine",
    "LedgerSequence",
    "LedgerTransaction",
]
