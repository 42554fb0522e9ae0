"""Exchange rate and ledger sequence models."""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import mapped_column, Mapped

from app.models.base import Base

# The exchange rate table holds exactly one row
EXCHANGE_RATE_ROW_ID = 1


class ExchangeRate(Base):
    """USDT -> JOD conversion rate, manually maintained."""

    __tablename__ = "exchange_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=EXCHANGE_RATE_ROW_ID)
    rate: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)

    updated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )


class LedgerSequence(Base):
    """
    Named counter for sequential identifiers.

    Read with a row lock inside the unit of work that consumes the value,
    so a rolled-back allocation never leaves a gap.
    """

    __tablename__ = "ledger_sequences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    next_value: Mapped[int] = mapped_column(BigInteger, default=1, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_ledger_sequences_name"),
    )
