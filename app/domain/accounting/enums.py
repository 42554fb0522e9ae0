"""Accounting domain enums."""

from enum import Enum as PyEnum


class AccountType(str, PyEnum):
    """Chart of Accounts account types."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class BalanceType(str, PyEnum):
    """Debit/credit side of a line, a transaction or an account's normal balance."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class Currency(str, PyEnum):
    """Settlement currencies."""
    JOD = "JOD"  # Jordanian dinar, the reporting currency
    USDT = "USDT"  # Tether


class JournalStatus(str, PyEnum):
    """Journal entry status. Entries are created posted; voiding is terminal."""
    POSTED = "POSTED"
    VOIDED = "VOIDED"
