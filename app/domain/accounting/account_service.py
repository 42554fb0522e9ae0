"""Account directory: chart of accounts maintenance."""

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.db.unit_of_work import unit_of_work
from app.models.accounting import Account, LedgerTransaction
from app.domain.accounting.balance_propagator import lock_accounts, propagate_from
from app.domain.accounting.chart_rules import (
    CHILD_CODE_SPAN,
    MAX_AMOUNT,
    PARENT_CODE_STEP,
    code_range_for,
    normal_balance_for,
    quantize_money,
    signed_effect,
)
from app.domain.accounting.enums import AccountType, BalanceType
from app.domain.accounting.errors import (
    AccountNotFound,
    CodeSpaceExhausted,
    ConstraintViolation,
)
from app.domain.accounting.inputs import AccountInput, AccountUpdate

logger = logging.getLogger(__name__)


def _used_codes(db: Session, start: int, end: int) -> set[int]:
    codes = db.scalars(select(Account.code)).all()
    used = set()
    for code in codes:
        if code.isdigit() and start <= int(code) < end:
            used.add(int(code))
    return used


def allocate_account_code(
    db: Session,
    account_type: AccountType,
    is_parent: bool,
    parent: Optional[Account] = None,
) -> str:
    """
    Pick the code for a new account.

    Parent accounts get the lowest free round hundred of the type's range.
    Leaf accounts get the lowest free integer after their parent's code (or
    after the start of the range when they have no parent), below
    ``parent_code + 100`` and inside the type's range. Codes freed by deleted
    accounts are reused.

    Raises:
        CodeSpaceExhausted: if no code is left
        ConstraintViolation: if the parent's code lies outside the type's range
    """
    code_range = code_range_for(account_type)

    base = int(parent.code) if parent is not None else code_range.start
    if base not in code_range:
        raise ConstraintViolation(
            f"Parent code {base} is outside the {AccountType(account_type).value} range "
            f"[{code_range.start}, {code_range.end})"
        )

    if is_parent:
        used = _used_codes(db, code_range.start, code_range.end)
        for code in range(code_range.start, code_range.end, PARENT_CODE_STEP):
            if code not in used:
                return str(code)
        raise CodeSpaceExhausted(
            f"No parent account codes left for {AccountType(account_type).value}"
        )

    end = min(base + CHILD_CODE_SPAN, code_range.end)
    used = _used_codes(db, base + 1, end)
    for code in range(base + 1, end):
        if code not in used:
            return str(code)
    raise CodeSpaceExhausted(f"No child account codes left under {base}")


def _signed_opening_balance(
    normal_balance: BalanceType,
    opening_balance: Decimal,
    opening_balance_type: Optional[BalanceType],
) -> Decimal:
    direction = opening_balance_type or normal_balance
    return quantize_money(signed_effect(normal_balance, direction, Decimal(opening_balance)))


def _check_opening_balance(opening_balance: Decimal) -> Decimal:
    try:
        opening_balance = Decimal(str(opening_balance or 0))
    except InvalidOperation:
        raise ConstraintViolation(f"Opening balance is not a number: {opening_balance!r}")
    if not opening_balance.is_finite() or opening_balance >= MAX_AMOUNT:
        raise ConstraintViolation(f"Opening balance must be a number below {MAX_AMOUNT:,}")
    opening_balance = quantize_money(opening_balance)
    if opening_balance < 0:
        raise ConstraintViolation("Opening balance cannot be negative, use the opening balance type")
    return opening_balance


def create_account(db: Session, account_data: AccountInput) -> Account:
    """
    Create an account with an auto-assigned code.

    The normal balance is derived from the account type. A leaf account
    starts with its opening balance (negative when the opening side is
    opposite to the normal balance); parent accounts start at zero and carry
    no opening balance.

    Raises:
        AccountNotFound: if parent_id does not exist
        ConstraintViolation: if the parent is not a parent account or the
            code would leave the type's range
        CodeSpaceExhausted: if the range is full
    """
    if not account_data.name or not account_data.name.strip():
        raise ConstraintViolation("Account name is required")

    account_type = AccountType(account_data.account_type)
    normal_balance = normal_balance_for(account_type)
    opening_balance = _check_opening_balance(account_data.opening_balance)

    with unit_of_work(db):
        parent = None
        if account_data.parent_id is not None:
            parent = db.get(Account, account_data.parent_id)
            if parent is None:
                raise AccountNotFound(account_data.parent_id)
            if not parent.is_parent:
                raise ConstraintViolation(f"Account {parent.code} is not a parent account")

        code = allocate_account_code(db, account_type, account_data.is_parent, parent)

        account = Account(
            code=code,
            name=account_data.name.strip(),
            account_type=account_type,
            is_parent=account_data.is_parent,
            currency=account_data.currency,
            normal_balance=normal_balance,
            parent_id=account_data.parent_id,
            created_by=account_data.created_by,
            has_transactions=False,
        )
        if account_data.is_parent:
            account.opening_balance = Decimal("0.00")
            account.opening_balance_type = None
            account.current_balance = Decimal("0.00")
        else:
            account.opening_balance = opening_balance
            account.opening_balance_type = account_data.opening_balance_type or normal_balance
            account.current_balance = _signed_opening_balance(
                normal_balance, opening_balance, account_data.opening_balance_type
            )
        db.add(account)
        db.flush()

        if account.parent_id and account.current_balance != 0:
            lock_accounts(db, [account.parent_id])
            propagate_from(db, account.parent_id)

    logger.info(f"Created account {account.code} {account.name} ({account_type.value})")
    return account


def update_account(db: Session, account_id: UUID, update: AccountUpdate) -> Account:
    """
    Update name, currency or opening balance of an account.

    Raises:
        AccountNotFound: if the account does not exist
        ConstraintViolation: if the opening balance is changed on an account
            that has transactions, or on a parent account
    """
    changes_opening = update.opening_balance is not None or update.opening_balance_type is not None

    with unit_of_work(db):
        account = db.get(Account, account_id)
        if account is None:
            raise AccountNotFound(account_id)

        if changes_opening:
            if account.has_transactions:
                logger.warning(f"Rejected opening balance change on account {account.code} with transactions")
                raise ConstraintViolation(
                    f"Cannot change the opening balance of account {account.code}, it has transactions"
                )
            if account.is_parent:
                raise ConstraintViolation(
                    f"Account {account.code} is a parent account and has no opening balance"
                )

        if update.name is not None:
            if not update.name.strip():
                raise ConstraintViolation("Account name is required")
            account.name = update.name.strip()
        if update.currency is not None:
            account.currency = update.currency

        if changes_opening:
            if update.opening_balance is not None:
                account.opening_balance = _check_opening_balance(update.opening_balance)
            if update.opening_balance_type is not None:
                account.opening_balance_type = BalanceType(update.opening_balance_type)
            account.current_balance = _signed_opening_balance(
                account.normal_balance, account.opening_balance, account.opening_balance_type
            )
            db.flush()

            if account.parent_id:
                lock_accounts(db, [account.parent_id])
                propagate_from(db, account.parent_id)

    logger.info(f"Updated account {account.code}")
    return account


def delete_account(db: Session, account_id: UUID) -> None:
    """
    Delete an account that has no transactions and no children.

    The former parent's balance is recomputed afterwards.

    Raises:
        AccountNotFound: if the account does not exist
        ConstraintViolation: if the account has transactions or children
    """
    with unit_of_work(db):
        account = db.get(Account, account_id)
        if account is None:
            raise AccountNotFound(account_id)

        if account.has_transactions or db.scalar(
            select(LedgerTransaction.id).where(LedgerTransaction.account_id == account_id).limit(1)
        ):
            raise ConstraintViolation(f"Cannot delete account {account.code}, it has transactions")

        has_children = db.scalar(select(Account.id).where(Account.parent_id == account_id).limit(1))
        if has_children:
            raise ConstraintViolation(f"Cannot delete account {account.code}, it has child accounts")

        parent_id = account.parent_id
        code = account.code
        db.delete(account)
        db.flush()

        if parent_id:
            lock_accounts(db, [parent_id])
            propagate_from(db, parent_id)

    logger.info(f"Deleted account {code}")


def get_account(db: Session, account_id: UUID) -> Account:
    """Fetch an account with its parent and children."""
    account = db.scalars(
        select(Account)
        .where(Account.id == account_id)
        .options(selectinload(Account.children), selectinload(Account.parent))
    ).first()
    if account is None:
        raise AccountNotFound(account_id)
    return account


def list_accounts(
    db: Session,
    account_type: Optional[AccountType] = None,
    parent_only: bool = False,
) -> List[Account]:
    """List accounts ordered by type then code."""
    query = select(Account)
    if account_type:
        query = query.where(Account.account_type == AccountType(account_type))
    if parent_only:
        query = query.where(Account.is_parent.is_(True))
    return list(db.scalars(query.order_by(Account.account_type, Account.code)))
