"""Input value objects accepted by the ledger engine."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from app.domain.accounting.enums import AccountType, BalanceType, Currency


@dataclass
class EntryLineInput:
    """One proposed journal line. Exactly one of the amounts must be positive."""
    account_id: Optional[UUID]
    currency: Optional[Currency]
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    description: Optional[str] = None

    @property
    def direction(self) -> BalanceType:
        return BalanceType.DEBIT if self.debit_amount > 0 else BalanceType.CREDIT

    @property
    def amount(self) -> Decimal:
        return self.debit_amount if self.debit_amount > 0 else self.credit_amount


@dataclass
class JournalEntryInput:
    date: date
    description: str
    lines: List[EntryLineInput]
    reference: Optional[str] = None
    created_by: str = "admin"


@dataclass
class AccountInput:
    name: str
    account_type: AccountType
    is_parent: bool = False
    currency: Currency = Currency.JOD
    parent_id: Optional[UUID] = None
    opening_balance: Decimal = Decimal("0")
    opening_balance_type: Optional[BalanceType] = None
    created_by: str = "admin"


@dataclass
class AccountUpdate:
    """Partial account update. ``None`` means leave the field unchanged."""
    name: Optional[str] = None
    currency: Optional[Currency] = None
    opening_balance: Optional[Decimal] = None
    opening_balance_type: Optional[BalanceType] = None
