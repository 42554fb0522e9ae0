"""Posting of journal lines as ledger transactions, and their reversal."""

import logging
from datetime import date
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.accounting import Account, JournalEntry, LedgerTransaction
from app.domain.accounting.balance_propagator import lock_accounts, propagate_from
from app.domain.accounting.chart_rules import quantize_money, signed_effect
from app.domain.accounting.errors import AccountNotFound, ConstraintViolation
from app.domain.accounting.inputs import EntryLineInput

logger = logging.getLogger(__name__)


def post_transactions(
    db: Session,
    journal_entry_id: UUID,
    posting_date: date,
    lines: List[EntryLineInput],
    exchange_rate: Decimal,
) -> List[LedgerTransaction]:
    """
    Apply journal lines to account balances.

    For every line with a non-zero amount a LedgerTransaction is recorded
    with the balance before and after, the account's balance is moved by the
    signed amount and the account is flagged as having transactions. The
    parent chain is then recomputed.

    Balances are only ever incremented or decremented from their current
    value, so this must run inside the same unit of work that locked the
    accounts.

    Args:
        db: Database session (inside a unit of work)
        journal_entry_id: Entry the transactions belong to
        posting_date: Date recorded on each transaction
        lines: Checked and validated lines
        exchange_rate: USDT -> JOD rate in effect for this posting

    Returns:
        Created LedgerTransaction rows, in posting order

    Raises:
        AccountNotFound: if a line references a missing account
        ConstraintViolation: if a line targets a parent account
    """
    lock_accounts(db, {line.account_id for line in lines})

    transactions: List[LedgerTransaction] = []
    for line in lines:
        amount = quantize_money(line.amount)
        if amount == 0:
            continue

        account = db.get(Account, line.account_id)
        if account is None:
            raise AccountNotFound(line.account_id)
        if account.is_parent:
            raise ConstraintViolation(
                f"Account {account.code} is a parent account and cannot be posted to directly"
            )

        balance_before = account.current_balance
        balance_after = quantize_money(
            balance_before + signed_effect(account.normal_balance, line.direction, amount)
        )

        transaction = LedgerTransaction(
            journal_entry_id=journal_entry_id,
            account_id=account.id,
            posting_order=len(transactions) + 1,
            date=posting_date,
            amount=amount,
            type=line.direction,
            currency=line.currency,
            exchange_rate=exchange_rate,
            balance_before=balance_before,
            balance_after=balance_after,
            description=line.description,
        )
        db.add(transaction)
        transactions.append(transaction)

        account.current_balance = balance_after
        account.has_transactions = True

        propagate_from(db, account.parent_id)

    db.flush()
    return transactions


def reverse_transactions(db: Session, entry: JournalEntry) -> int:
    """
    Undo every recorded transaction of ``entry`` and delete the rows.

    Transactions are undone newest first using their recorded type and
    amount, never re-derived from current balances, so unrelated postings
    made to the same accounts since are preserved.

    Returns:
        Number of transactions reversed
    """
    transactions = db.scalars(
        select(LedgerTransaction)
        .where(LedgerTransaction.journal_entry_id == entry.id)
        .order_by(LedgerTransaction.created_at.desc(), LedgerTransaction.posting_order.desc())
    ).unique().all()

    lock_accounts(db, {transaction.account_id for transaction in transactions})

    for transaction in transactions:
        account = db.get(Account, transaction.account_id)
        if account is None:
            raise AccountNotFound(transaction.account_id)

        undo = -signed_effect(account.normal_balance, transaction.type, transaction.amount)
        account.current_balance = quantize_money(account.current_balance + undo)

        propagate_from(db, account.parent_id)

    for transaction in transactions:
        db.delete(transaction)
    db.flush()
    db.expire(entry, ["transactions"])

    logger.info(f"Reversed {len(transactions)} transactions of journal entry {entry.entry_number}")
    return len(transactions)
