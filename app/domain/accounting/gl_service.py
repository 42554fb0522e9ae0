"""General Ledger service: journal entry lifecycle (create, edit, void) and queries."""

import logging
import math
from datetime import datetime, date
from decimal import Decimal
from typing import List, Dict, Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.db.unit_of_work import unit_of_work
from app.models.accounting import (
    JournalEntry,
    JournalLine,
    LedgerTransaction,
)
from app.domain.accounting.balance_propagator import lock_accounts
from app.domain.accounting.chart_rules import convert_amount, quantize_money
from app.domain.accounting.entry_validator import EntryTotals, check_lines, validate_entry
from app.domain.accounting.enums import Currency, JournalStatus
from app.domain.accounting.errors import (
    AlreadyVoided,
    ConstraintViolation,
    InvalidExchangeRate,
    InvalidLineInput,
    JournalEntryNotFound,
)
from app.domain.accounting.inputs import EntryLineInput, JournalEntryInput
from app.domain.accounting.sequences import JOURNAL_ENTRY_SEQUENCE, next_sequence_value
from app.domain.accounting.transaction_poster import post_transactions, reverse_transactions

logger = logging.getLogger(__name__)


def _prepare(entry_data: JournalEntryInput, exchange_rate: Decimal) -> EntryTotals:
    """Run every input check that must pass before the unit of work opens."""
    if not entry_data.description or not entry_data.description.strip():
        raise InvalidLineInput("Journal entry description is required")
    if exchange_rate is None or Decimal(exchange_rate) <= 0:
        raise InvalidExchangeRate(f"Exchange rate must be greater than zero, got {exchange_rate}")

    check_lines(entry_data.lines)
    return validate_entry(entry_data.lines)


def _apply_totals(entry: JournalEntry, totals: EntryTotals) -> None:
    entry.total_debits_jod = totals.total_debits_jod
    entry.total_credits_jod = totals.total_credits_jod
    entry.total_debits_usdt = totals.total_debits_usdt
    entry.total_credits_usdt = totals.total_credits_usdt


def _build_lines(lines: List[EntryLineInput], exchange_rate: Decimal) -> List[JournalLine]:
    """Journal lines with the posting rate and the amount normalized to JOD."""
    return [
        JournalLine(
            line_number=index + 1,
            account_id=line.account_id,
            debit_amount=quantize_money(line.debit_amount),
            credit_amount=quantize_money(line.credit_amount),
            currency=line.currency,
            exchange_rate=exchange_rate,
            converted_amount_jod=convert_amount(
                quantize_money(line.amount), line.currency, Currency.JOD, exchange_rate
            ),
            description=line.description,
        )
        for index, line in enumerate(lines)
    ]


def _get_entry_for_update(db: Session, entry_id: UUID) -> JournalEntry:
    entry = db.scalars(
        select(JournalEntry).where(JournalEntry.id == entry_id).with_for_update()
    ).first()
    if entry is None:
        raise JournalEntryNotFound(entry_id)
    return entry


def _next_entry_number(db: Session) -> int:
    seed = (db.scalar(select(func.max(JournalEntry.entry_number))) or 0) + 1
    return next_sequence_value(db, JOURNAL_ENTRY_SEQUENCE, seed=seed)


def create_journal_entry(
    db: Session,
    entry_data: JournalEntryInput,
    exchange_rate: Decimal,
) -> JournalEntry:
    """
    Create and post a journal entry.

    Lines are checked and balanced per currency before anything is written.
    Number allocation, insertion and posting then happen in one unit of
    work: either all of it commits or none of it does.

    Args:
        db: Database session
        entry_data: Date, description, optional reference, lines, author
        exchange_rate: USDT -> JOD rate recorded on every line and transaction

    Returns:
        Created JournalEntry instance (status POSTED)

    Raises:
        InvalidLineInput, InvalidExchangeRate, ImbalancedEntry: before any write
        AccountNotFound, ConstraintViolation: during posting (rolled back)
        ConcurrencyConflict: if a concurrent writer won the race
    """
    totals = _prepare(entry_data, exchange_rate)
    exchange_rate = Decimal(exchange_rate)

    with unit_of_work(db):
        journal_entry = JournalEntry(
            entry_number=_next_entry_number(db),
            date=entry_data.date,
            description=entry_data.description,
            reference=entry_data.reference,
            status=JournalStatus.POSTED,
            created_by=entry_data.created_by,
        )
        _apply_totals(journal_entry, totals)
        journal_entry.lines = _build_lines(entry_data.lines, exchange_rate)
        db.add(journal_entry)
        db.flush()  # Get the ID

        post_transactions(db, journal_entry.id, journal_entry.date, entry_data.lines, exchange_rate)

    logger.info(
        f"Created journal entry #{journal_entry.entry_number} ({journal_entry.id}) "
        f"with {len(entry_data.lines)} lines"
    )
    return journal_entry


def edit_journal_entry(
    db: Session,
    entry_id: UUID,
    entry_data: JournalEntryInput,
    exchange_rate: Decimal,
) -> JournalEntry:
    """
    Replace the content of a posted journal entry.

    The entry's recorded transactions are reversed, its fields, totals and
    lines replaced, and the new lines posted at ``exchange_rate``, all in one
    unit of work. ``entry_number``, ``status`` and ``created_by`` are kept.

    Raises:
        JournalEntryNotFound: if the entry does not exist
        ConstraintViolation: if the entry is voided
        InvalidLineInput, InvalidExchangeRate, ImbalancedEntry: before any write
    """
    totals = _prepare(entry_data, exchange_rate)
    exchange_rate = Decimal(exchange_rate)

    with unit_of_work(db):
        journal_entry = _get_entry_for_update(db, entry_id)
        if journal_entry.status == JournalStatus.VOIDED:
            raise ConstraintViolation(
                f"Journal entry #{journal_entry.entry_number} is voided and cannot be edited"
            )

        # Lock old and new accounts in one ordered pass before touching balances
        old_account_ids = db.scalars(
            select(LedgerTransaction.account_id).where(LedgerTransaction.journal_entry_id == entry_id)
        ).all()
        lock_accounts(db, set(old_account_ids) | {line.account_id for line in entry_data.lines})

        reverse_transactions(db, journal_entry)

        journal_entry.date = entry_data.date
        journal_entry.description = entry_data.description
        journal_entry.reference = entry_data.reference
        _apply_totals(journal_entry, totals)

        journal_entry.lines.clear()
        db.flush()
        journal_entry.lines.extend(_build_lines(entry_data.lines, exchange_rate))
        db.flush()

        post_transactions(db, journal_entry.id, journal_entry.date, entry_data.lines, exchange_rate)

    logger.info(f"Edited journal entry #{journal_entry.entry_number} ({journal_entry.id})")
    return journal_entry


def void_journal_entry(db: Session, entry_id: UUID) -> Dict[str, Any]:
    """
    Void a posted journal entry.

    All its transactions are reversed and deleted; the entry and its lines
    stay for audit with status VOIDED. There is no way back.

    Raises:
        JournalEntryNotFound: if the entry does not exist
        AlreadyVoided: if the entry was voided before
    """
    with unit_of_work(db):
        journal_entry = _get_entry_for_update(db, entry_id)
        if journal_entry.status == JournalStatus.VOIDED:
            logger.warning(f"Journal entry #{journal_entry.entry_number} is already voided")
            raise AlreadyVoided(entry_id)

        reverse_transactions(db, journal_entry)

        journal_entry.status = JournalStatus.VOIDED
        journal_entry.voided_at = datetime.utcnow()

    logger.info(f"Voided journal entry #{journal_entry.entry_number} ({journal_entry.id})")
    return {"success": True}


def get_journal_entry(db: Session, entry_id: UUID) -> JournalEntry:
    """Fetch a journal entry with its lines and transactions."""
    journal_entry = db.scalars(
        select(JournalEntry)
        .where(JournalEntry.id == entry_id)
        .options(selectinload(JournalEntry.lines), selectinload(JournalEntry.transactions))
    ).first()
    if journal_entry is None:
        raise JournalEntryNotFound(entry_id)
    return journal_entry


def list_journal_entries(
    db: Session,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    account_id: Optional[UUID] = None,
    status: Optional[JournalStatus] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    """
    List journal entries, newest first.

    Args:
        db: Database session
        date_from: Inclusive lower date bound
        date_to: Inclusive upper date bound
        account_id: Only entries with at least one line on this account
        status: Only entries with this status
        page: 1-based page number
        limit: Page size

    Returns:
        Dict with entries, total, page and total_pages
    """
    page = max(page, 1)
    limit = max(limit, 1)

    filters = []
    if date_from:
        filters.append(JournalEntry.date >= date_from)
    if date_to:
        filters.append(JournalEntry.date <= date_to)
    if account_id:
        filters.append(JournalEntry.lines.any(JournalLine.account_id == account_id))
    if status:
        filters.append(JournalEntry.status == JournalStatus(status))

    total = db.scalar(select(func.count()).select_from(JournalEntry).where(*filters)) or 0

    entries = db.scalars(
        select(JournalEntry)
        .where(*filters)
        .options(selectinload(JournalEntry.lines))
        .order_by(JournalEntry.date.desc(), JournalEntry.entry_number.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    return {
        "entries": list(entries),
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
    }
