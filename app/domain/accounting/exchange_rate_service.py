"""Exchange rate store: the single manually maintained USDT -> JOD rate."""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.unit_of_work import unit_of_work
from app.models.accounting import ExchangeRate, EXCHANGE_RATE_ROW_ID
from app.domain.accounting.errors import InvalidExchangeRate

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


def _load(db: Session, for_update: bool = False) -> ExchangeRate | None:
    query = select(ExchangeRate).where(ExchangeRate.id == EXCHANGE_RATE_ROW_ID)
    if for_update:
        query = query.with_for_update()
    return db.scalars(query).first()


def get_exchange_rate(db: Session) -> ExchangeRate:
    """
    Return the rate record, creating it with the configured default if absent.
    """
    exchange_rate = _load(db)
    if exchange_rate is not None:
        return exchange_rate

    with unit_of_work(db):
        exchange_rate = ExchangeRate(
            id=EXCHANGE_RATE_ROW_ID,
            rate=get_settings().default_exchange_rate,
            updated_by=SYSTEM_ACTOR,
        )
        db.add(exchange_rate)

    logger.info(f"Initialized exchange rate to default {exchange_rate.rate}")
    return exchange_rate


def current_rate(db: Session) -> Decimal:
    """The rate value to pass explicitly into posting operations."""
    return Decimal(get_exchange_rate(db).rate)


def set_exchange_rate(db: Session, rate, updated_by: str) -> ExchangeRate:
    """
    Replace the rate.

    Raises:
        InvalidExchangeRate: if rate is not a number greater than zero
    """
    try:
        rate = Decimal(str(rate))
    except (InvalidOperation, TypeError):
        raise InvalidExchangeRate(f"Exchange rate must be a number, got {rate!r}")
    if not rate.is_finite() or rate <= 0:
        raise InvalidExchangeRate("Exchange rate must be greater than zero")

    with unit_of_work(db):
        exchange_rate = _load(db, for_update=True)
        if exchange_rate is None:
            exchange_rate = ExchangeRate(id=EXCHANGE_RATE_ROW_ID, rate=rate, updated_by=updated_by)
            db.add(exchange_rate)
        else:
            previous = exchange_rate.rate
            exchange_rate.rate = rate
            exchange_rate.updated_by = updated_by
            logger.info(f"Exchange rate changed from {previous} to {rate} by {updated_by}")

    return exchange_rate
