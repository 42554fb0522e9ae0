"""Ledger error taxonomy.

Every error carries a machine-distinguishable ``kind`` (the class name) and a
human-readable message. Mapping kinds to transport status codes is left to
the caller (see ``app.api.errors``).
"""

from decimal import Decimal
from uuid import UUID


class LedgerError(Exception):
    """Base class for all ledger engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class ImbalancedEntry(LedgerError):
    """Debits and credits differ for one currency."""

    def __init__(self, currency: str, total_debits: Decimal, total_credits: Decimal):
        self.currency = currency
        self.total_debits = total_debits
        self.total_credits = total_credits
        super().__init__(
            f"{currency} imbalance: debits {total_debits} != credits {total_credits}"
        )


class InvalidLineInput(LedgerError):
    """A proposed line is structurally invalid."""


class InvalidExchangeRate(LedgerError):
    """Exchange rate is missing or not strictly positive."""


class ConstraintViolation(LedgerError):
    """A structural rule of the chart of accounts or the journal was broken."""


class CodeSpaceExhausted(ConstraintViolation):
    """No free account code remains in the requested range."""


class AlreadyVoided(LedgerError):
    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} is already voided")


class AccountNotFound(LedgerError):
    def __init__(self, account_id: UUID):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class JournalEntryNotFound(LedgerError):
    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Journal entry not found: {entry_id}")


class ConcurrencyConflict(LedgerError):
    """The unit of work lost a race with a concurrent writer. Safe to retry."""
