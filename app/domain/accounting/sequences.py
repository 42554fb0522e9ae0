"""Sequential number allocation."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.accounting import LedgerSequence

JOURNAL_ENTRY_SEQUENCE = "journal_entry_number"


def next_sequence_value(db: Session, name: str, seed: int = 1) -> int:
    """
    Allocate the next value of a named sequence.

    The counter row is locked until the surrounding unit of work ends, so
    concurrent allocations serialize and a rolled-back transaction gives its
    number back. Committed values are therefore consecutive.

    ``seed`` is the first value handed out when the counter row does not
    exist yet.
    """
    seq = db.scalars(
        select(LedgerSequence).where(LedgerSequence.name == name).with_for_update()
    ).first()

    if seq is None:
        # First allocation; a concurrent first insert fails on the unique
        # name constraint and surfaces as ConcurrencyConflict
        seq = LedgerSequence(name=name, next_value=seed)
        db.add(seq)
        db.flush()

    value = seq.next_value
    seq.next_value = value + 1
    db.flush()
    return value
