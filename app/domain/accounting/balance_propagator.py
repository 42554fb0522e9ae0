"""Parent balance propagation up the account tree."""

import logging
from decimal import Decimal
from typing import Iterable, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.accounting import Account
from app.domain.accounting.chart_rules import quantize_money
from app.domain.accounting.errors import ConstraintViolation

logger = logging.getLogger(__name__)


def ancestor_chain(db: Session, account_id: UUID | None) -> List[Account]:
    """
    Materialize the chain starting at ``account_id`` and following
    ``parent_id`` up to the root. The starting account comes first.

    Raises:
        ConstraintViolation: if the parent links form a cycle
    """
    chain: List[Account] = []
    seen: set[UUID] = set()
    current_id = account_id

    while current_id is not None:
        if current_id in seen:
            raise ConstraintViolation(f"Account hierarchy contains a cycle at {current_id}")
        seen.add(current_id)

        account = db.get(Account, current_id)
        if account is None:
            break
        chain.append(account)
        current_id = account.parent_id

    return chain


def lock_accounts(db: Session, account_ids: Iterable[UUID]) -> List[Account]:
    """
    Lock the given accounts together with all their ancestors.

    Rows are locked in ascending id order so concurrent writers touching
    overlapping accounts queue instead of deadlocking. Returns the locked
    accounts with fresh state.
    """
    to_lock: set[UUID] = set()
    for account_id in account_ids:
        for account in ancestor_chain(db, account_id):
            to_lock.add(account.id)

    if not to_lock:
        return []

    stmt = (
        select(Account)
        .where(Account.id.in_(to_lock))
        .order_by(Account.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return list(db.scalars(stmt))


def recompute_parent(db: Session, parent: Account) -> Decimal:
    """
    Set a parent's balance to the sum of its direct children's balances.

    Children are re-read and locked, so siblings changed by other writers
    since this session loaded them are summed with their committed balance.
    Pending changes must be flushed first.
    """
    children = db.scalars(
        select(Account)
        .where(Account.parent_id == parent.id)
        .order_by(Account.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).all()
    total = quantize_money(sum((child.current_balance for child in children), Decimal("0")))
    parent.current_balance = total
    db.flush()
    return total


def propagate_from(db: Session, parent_id: UUID | None) -> None:
    """
    Recompute balances from ``parent_id`` up to the root.

    Each ancestor is recomputed from its children's current balances, lowest
    first. The walk stops at the root or at the first account that is not
    flagged ``is_parent``. Running it again on an unchanged subtree yields
    the same balances.
    """
    if parent_id is None:
        return

    # Pending leaf updates must be visible to the children queries
    db.flush()

    for account in ancestor_chain(db, parent_id):
        if not account.is_parent:
            logger.debug(f"Stopping propagation at non-parent account {account.code}")
            break
        recompute_parent(db, account)
