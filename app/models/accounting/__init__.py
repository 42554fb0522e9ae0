"""Accounting models."""

from .account import Account
from .journal_entry import JournalEntry, JournalLine, LedgerTransaction
from .exchange_rate import ExchangeRate, LedgerSequence, EXCHANGE_RATE_ROW_ID

__all__ = [
    "Account",
    "JournalEntry",
    "JournalLine",
    "LedgerTransaction",
    "ExchangeRate",
    "LedgerSequence",
    "EXCHANGE_RATE_ROW_ID",
]
