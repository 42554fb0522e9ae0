"""Journal Entry, Journal Line and Ledger Transaction models."""

from datetime import datetime, date
from decimal import Decimal
from uuid import uuid4, UUID
from sqlalchemy import (
    String,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    CheckConstraint,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import mapped_column, Mapped, relationship

from app.models.base import Base, TimestampMixin
from app.domain.accounting.enums import BalanceType, Currency, JournalStatus


class JournalEntry(TimestampMixin, Base):
    """Journal Entry model."""

    __tablename__ = "journal_entries"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    entry_number: Mapped[int] = mapped_column(Integer, nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)

    status: Mapped[JournalStatus] = mapped_column(
        Enum(JournalStatus),
        default=JournalStatus.POSTED,
        nullable=False
    )

    # Per-currency totals, rounded to 2 places
    total_debits_jod: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    total_credits_jod: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    total_debits_usdt: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    total_credits_usdt: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)

    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    voided_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    lines: Mapped[list["JournalLine"]] = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_number",
    )
    transactions: Mapped[list["LedgerTransaction"]] = relationship(
        "LedgerTransaction",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="LedgerTransaction.posting_order",
    )

    __table_args__ = (
        UniqueConstraint("entry_number", name="uq_journal_entries_entry_number"),
        Index("idx_journal_entries_date", "date"),
        Index("idx_journal_entries_status", "status"),
    )


class JournalLine(TimestampMixin, Base):
    """Journal Line model. Exactly one of debit_amount/credit_amount is positive."""

    __tablename__ = "journal_lines"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    journal_entry_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        nullable=False
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationship
    entry: Mapped[JournalEntry] = relationship("JournalEntry", back_populates="lines")

    account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=False
    )
    account = relationship("Account", lazy="joined")

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    debit_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    credit_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    currency: Mapped[Currency] = mapped_column(Enum(Currency), nullable=False)

    # Rate in effect when the line was posted, and the line amount in JOD at that rate
    exchange_rate: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    converted_amount_jod: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("debit_amount >= 0", name="check_debit_non_negative"),
        CheckConstraint("credit_amount >= 0", name="check_credit_non_negative"),
        Index("idx_journal_lines_account_id", "account_id"),
    )


class LedgerTransaction(Base):
    """
    Posting ledger row: the effect of one journal line on one account balance.

    Rows are written by the poster and removed only when their entry is
    reversed (edit or void).
    """

    __tablename__ = "ledger_transactions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    journal_entry_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        nullable=False
    )
    entry: Mapped[JournalEntry] = relationship("JournalEntry", back_populates="transactions")

    account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=False
    )
    account = relationship("Account", lazy="joined")

    # Order of application within the entry
    posting_order: Mapped[int] = mapped_column(Integer, nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    type: Mapped[BalanceType] = mapped_column(Enum(BalanceType), nullable=False)
    currency: Mapped[Currency] = mapped_column(Enum(Currency), nullable=False)
    exchange_rate: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)

    balance_before: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    balance_after: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_transaction_amount_positive"),
        Index("idx_ledger_transactions_entry", "journal_entry_id"),
        Index("idx_ledger_transactions_account", "account_id"),
    )
