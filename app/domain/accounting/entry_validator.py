"""Stateless checks run on proposed journal lines before anything is written."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List

from app.domain.accounting.chart_rules import MAX_AMOUNT, quantize_money
from app.domain.accounting.enums import Currency
from app.domain.accounting.errors import ImbalancedEntry, InvalidLineInput
from app.domain.accounting.inputs import EntryLineInput

ZERO = Decimal("0.00")


@dataclass
class CurrencyTotals:
    debits: Decimal = ZERO
    credits: Decimal = ZERO

    @property
    def is_balanced(self) -> bool:
        return self.debits == self.credits


@dataclass
class EntryTotals:
    """Per-currency debit/credit sums of a proposed entry."""
    by_currency: Dict[Currency, CurrencyTotals] = field(
        default_factory=lambda: {currency: CurrencyTotals() for currency in Currency}
    )

    @property
    def total_debits_jod(self) -> Decimal:
        return self.by_currency[Currency.JOD].debits

    @property
    def total_credits_jod(self) -> Decimal:
        return self.by_currency[Currency.JOD].credits

    @property
    def total_debits_usdt(self) -> Decimal:
        return self.by_currency[Currency.USDT].debits

    @property
    def total_credits_usdt(self) -> Decimal:
        return self.by_currency[Currency.USDT].credits


def _as_decimal(value, index: int, name: str) -> Decimal:
    try:
        return Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        raise InvalidLineInput(f"Line {index + 1}: {name} is not a number: {value!r}")


def check_lines(lines: List[EntryLineInput]) -> None:
    """
    Reject structurally invalid lines.

    Each line needs an account and a currency, finite non-negative amounts
    below ``MAX_AMOUNT``, and exactly one of debit/credit strictly positive.
    Amounts are normalized to ``Decimal`` in place.

    Raises:
        InvalidLineInput: naming the first offending line (1-based)
    """
    if not lines:
        raise InvalidLineInput("A journal entry needs at least one line")

    for index, line in enumerate(lines):
        if not line.account_id:
            raise InvalidLineInput(f"Line {index + 1}: account is required")
        if not line.currency:
            raise InvalidLineInput(f"Line {index + 1}: currency is required")
        try:
            line.currency = Currency(line.currency)
        except ValueError:
            raise InvalidLineInput(f"Line {index + 1}: unsupported currency {line.currency!r}")

        line.debit_amount = _as_decimal(line.debit_amount, index, "debit amount")
        line.credit_amount = _as_decimal(line.credit_amount, index, "credit amount")

        if not line.debit_amount.is_finite() or not line.credit_amount.is_finite():
            raise InvalidLineInput(f"Line {index + 1}: amounts must be finite numbers")
        if line.debit_amount >= MAX_AMOUNT or line.credit_amount >= MAX_AMOUNT:
            raise InvalidLineInput(f"Line {index + 1}: amount must be below {MAX_AMOUNT:,}")

        if line.debit_amount < 0 or line.credit_amount < 0:
            raise InvalidLineInput(f"Line {index + 1}: amounts cannot be negative")
        if line.debit_amount > 0 and line.credit_amount > 0:
            raise InvalidLineInput(f"Line {index + 1}: a line is either a debit or a credit, not both")
        if line.debit_amount == 0 and line.credit_amount == 0:
            raise InvalidLineInput(f"Line {index + 1}: a line needs a debit or a credit amount")


def compute_totals(lines: List[EntryLineInput]) -> EntryTotals:
    """Sum debits and credits per currency, each sum rounded to 2 places."""
    totals = EntryTotals()
    for line in lines:
        bucket = totals.by_currency[Currency(line.currency)]
        bucket.debits += Decimal(line.debit_amount)
        bucket.credits += Decimal(line.credit_amount)

    for bucket in totals.by_currency.values():
        bucket.debits = quantize_money(bucket.debits)
        bucket.credits = quantize_money(bucket.credits)
    return totals


def validate_entry(lines: List[EntryLineInput]) -> EntryTotals:
    """
    Verify that debits equal credits independently for every currency.

    A currency with no lines is trivially balanced (0 == 0).

    Returns:
        EntryTotals for storing on the journal entry

    Raises:
        ImbalancedEntry: for the first unbalanced currency (JOD, then USDT)
        InvalidLineInput: if a currency total is too large to store
    """
    totals = compute_totals(lines)
    for currency in Currency:
        bucket = totals.by_currency[currency]
        if bucket.debits >= MAX_AMOUNT or bucket.credits >= MAX_AMOUNT:
            raise InvalidLineInput(f"{currency.value} totals must be below {MAX_AMOUNT:,}")
        if not bucket.is_balanced:
            raise ImbalancedEntry(currency.value, bucket.debits, bucket.credits)
    return totals
