from typing import Iterator

from sqlalchemy.orm import Session

from .session import SessionLocal


def get_db() -> Iterator[Session]:
    """
    Request-scoped database session.

    Ledger writes commit through ``unit_of_work``; anything a request leaves
    uncommitted is discarded when the session closes.

    Usage:
        @router.post("")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
