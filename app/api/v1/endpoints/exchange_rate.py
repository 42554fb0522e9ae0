"""Exchange rate API endpoints."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_actor
from app.db.dependencies import get_db
from app.domain.accounting.exchange_rate_service import get_exchange_rate, set_exchange_rate
from app.schemas.exchange_rate import ExchangeRateResponse, ExchangeRateUpdate

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=ExchangeRateResponse)
def get_rate(db: Session = Depends(get_db)) -> ExchangeRateResponse:
    """Current USDT -> JOD rate. Created with the default on first read."""
    return ExchangeRateResponse.model_validate(get_exchange_rate(db))


@router.put("", response_model=ExchangeRateResponse)
def set_rate(
    payload: ExchangeRateUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
) -> ExchangeRateResponse:
    """Replace the USDT -> JOD rate. Entries already posted keep their recorded rate."""
    exchange_rate = set_exchange_rate(db, payload.rate, updated_by=actor)
    logger.info("Exchange rate updated", rate=str(exchange_rate.rate), actor=actor)
    return ExchangeRateResponse.model_validate(exchange_rate)
