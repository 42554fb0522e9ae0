"""Journal entry API endpoints."""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_actor
from app.core.config import get_settings
from app.db.dependencies import get_db
from app.domain.accounting.enums import JournalStatus
from app.domain.accounting.exchange_rate_service import current_rate
from app.domain.accounting.gl_service import (
    create_journal_entry,
    edit_journal_entry,
    void_journal_entry,
    get_journal_entry,
    list_journal_entries,
)
from app.domain.accounting.inputs import EntryLineInput, JournalEntryInput
from app.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalEntryDetailResponse,
    JournalEntryListResponse,
    VoidJournalEntryResponse,
)

logger = structlog.get_logger()

router = APIRouter()


def _to_input(payload: JournalEntryCreate, actor: str) -> JournalEntryInput:
    return JournalEntryInput(
        date=payload.date or date.today(),
        description=payload.description,
        reference=payload.reference,
        created_by=actor,
        lines=[
            EntryLineInput(
                account_id=line.account_id,
                currency=line.currency,
                debit_amount=line.debit_amount,
                credit_amount=line.credit_amount,
                description=line.description,
            )
            for line in payload.lines
        ],
    )


@router.get("", response_model=JournalEntryListResponse)
def list_entries(
    date_from: Optional[date] = Query(None, description="Inclusive start date"),
    date_to: Optional[date] = Query(None, description="Inclusive end date"),
    account_id: Optional[UUID] = Query(None, description="Only entries touching this account"),
    status: Optional[JournalStatus] = Query(None, description="POSTED or VOIDED"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
) -> JournalEntryListResponse:
    """List journal entries, newest first."""
    settings = get_settings()
    limit = min(limit or settings.default_page_size, settings.max_page_size)

    result = list_journal_entries(
        db=db,
        date_from=date_from,
        date_to=date_to,
        account_id=account_id,
        status=status,
        page=page,
        limit=limit,
    )
    return JournalEntryListResponse(
        entries=[JournalEntryResponse.model_validate(entry) for entry in result["entries"]],
        total=result["total"],
        page=result["page"],
        total_pages=result["total_pages"],
    )


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: JournalEntryCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> JournalEntryResponse:
    """
    Create and post a journal entry at the current exchange rate.

    Debits must equal credits for each currency.
    """
    rate = current_rate(db)
    journal_entry = create_journal_entry(db, _to_input(payload, actor), exchange_rate=rate)

    logger.info("Journal entry created", entry_number=journal_entry.entry_number, actor=actor)
    return JournalEntryResponse.model_validate(journal_entry)


@router.get("/{entry_id}", response_model=JournalEntryDetailResponse)
def get_entry(
    entry_id: UUID,
    db: Session = Depends(get_db),
) -> JournalEntryDetailResponse:
    """Get a journal entry with its lines and ledger transactions."""
    return JournalEntryDetailResponse.model_validate(get_journal_entry(db, entry_id))


@router.put("/{entry_id}", response_model=JournalEntryResponse)
def edit_entry(
    entry_id: UUID,
    payload: JournalEntryCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> JournalEntryResponse:
    """
    Edit a posted journal entry.

    The previous postings are reversed and the new lines posted at the
    current exchange rate; the entry number is kept.
    """
    rate = current_rate(db)
    journal_entry = edit_journal_entry(db, entry_id, _to_input(payload, actor), exchange_rate=rate)

    logger.info("Journal entry edited", entry_number=journal_entry.entry_number, actor=actor)
    return JournalEntryResponse.model_validate(journal_entry)


@router.delete("/{entry_id}", response_model=VoidJournalEntryResponse)
def void_entry(
    entry_id: UUID,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> VoidJournalEntryResponse:
    """Void a journal entry. Its postings are reversed; the entry stays for audit."""
    result = void_journal_entry(db, entry_id)

    logger.info("Journal entry voided", entry_id=str(entry_id), actor=actor)
    return VoidJournalEntryResponse(**result)
