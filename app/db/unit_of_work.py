"""Atomic unit of work around a SQLAlchemy session."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from app.domain.accounting.errors import ConcurrencyConflict

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs raised when a transaction loses a race
SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"

# Unique constraints whose violation means two writers collided, by
# PostgreSQL constraint name and by SQLite "table.column" message
CONTENTION_MARKERS = (
    "uq_journal_entries_entry_number",
    "uq_ledger_sequences_name",
    "uq_accounts_code",
    "journal_entries.entry_number",
    "ledger_sequences.name",
    "accounts.code",
    "exchange_rates_pkey",
    "exchange_rates.id",
)


def is_contention_error(exc: DBAPIError) -> bool:
    """Return True when a database error is caused by concurrent writers."""
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode in (SERIALIZATION_FAILURE, DEADLOCK_DETECTED):
        return True
    if isinstance(exc, IntegrityError):
        text = str(exc.orig)
        return any(marker in text for marker in CONTENTION_MARKERS)
    return False


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block of ledger writes as one atomic unit.

    Commits when the block exits normally. On any exception the session is
    rolled back and the exception re-raised; database contention is
    re-raised as ``ConcurrencyConflict`` so callers can retry the whole
    operation.

    Usage:
        with unit_of_work(db):
            ...
    """
    try:
        yield db
        db.commit()
    except DBAPIError as e:
        db.rollback()
        if is_contention_error(e):
            logger.warning(f"Unit of work aborted by concurrent writer: {e.orig}")
            raise ConcurrencyConflict(
                "The operation conflicted with a concurrent update, retry it"
            ) from e
        raise
    except BaseException:
        db.rollback()
        raise
