"""Chart-of-accounts rules: normal balances, code ranges, currency conversion."""

from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple

from app.domain.accounting.enums import AccountType, BalanceType, Currency

CENT = Decimal("0.01")

# Numeric(18, 2) columns hold at most 16 integer digits
MAX_AMOUNT = Decimal(10) ** 16


class CodeRange(NamedTuple):
    """Half-open account code range ``[start, end)``."""
    start: int
    end: int

    def __contains__(self, code: int) -> bool:
        return self.start <= code < self.end


NORMAL_BALANCES = {
    AccountType.ASSET: BalanceType.DEBIT,
    AccountType.EXPENSE: BalanceType.DEBIT,
    AccountType.LIABILITY: BalanceType.CREDIT,
    AccountType.EQUITY: BalanceType.CREDIT,
    AccountType.REVENUE: BalanceType.CREDIT,
}

CODE_RANGES = {
    AccountType.ASSET: CodeRange(1000, 1999),
    AccountType.LIABILITY: CodeRange(2000, 2999),
    AccountType.EQUITY: CodeRange(3000, 3999),
    AccountType.REVENUE: CodeRange(4000, 4999),
    AccountType.EXPENSE: CodeRange(5000, 5999),
}

# Parent accounts get round hundreds; children of a parent live below parent + 100
PARENT_CODE_STEP = 100
CHILD_CODE_SPAN = 100


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary amount to 2 decimal places, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def normal_balance_for(account_type: AccountType) -> BalanceType:
    return NORMAL_BALANCES[AccountType(account_type)]


def code_range_for(account_type: AccountType) -> CodeRange:
    return CODE_RANGES[AccountType(account_type)]


def signed_effect(
    normal_balance: BalanceType,
    direction: BalanceType,
    amount: Decimal,
) -> Decimal:
    """
    Signed change to an account balance for a debit or credit of ``amount``.

    The amount increases the balance when the direction matches the
    account's normal balance and decreases it otherwise.
    """
    if BalanceType(direction) == BalanceType(normal_balance):
        return amount
    return -amount


def convert_amount(
    amount: Decimal,
    from_currency: Currency,
    to_currency: Currency,
    exchange_rate: Decimal,
) -> Decimal:
    """
    Convert between JOD and USDT using a USDT->JOD rate.

    Same-currency conversion returns the amount unchanged.
    """
    from_currency = Currency(from_currency)
    to_currency = Currency(to_currency)
    if from_currency == to_currency:
        return amount
    if from_currency == Currency.USDT and to_currency == Currency.JOD:
        return quantize_money(amount * exchange_rate)
    return quantize_money(amount / exchange_rate)
