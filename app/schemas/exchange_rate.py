"""Exchange rate schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ExchangeRateResponse(BaseModel):
    """USDT -> JOD rate with its last change audit."""
    rate: Decimal
    updated_by: str
    updated_at: datetime

    class Config:
        from_attributes = True


class ExchangeRateUpdate(BaseModel):
    # Positivity is enforced by the ledger so the error carries its kind
    rate: Decimal
