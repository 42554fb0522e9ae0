"""Account (chart of accounts) model."""

from decimal import Decimal
from uuid import uuid4, UUID
from sqlalchemy import String, Boolean, Enum, ForeignKey, Index, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import mapped_column, Mapped, relationship

from app.models.base import Base, TimestampMixin
from app.domain.accounting.enums import AccountType, BalanceType, Currency


class Account(TimestampMixin, Base):
    """
    Node of the account forest.

    Leaf accounts receive postings; parent accounts hold the sum of their
    children's balances and are never posted to directly.
    """

    __tablename__ = "accounts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    code: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    account_type: Mapped[AccountType] = mapped_column(Enum(AccountType), nullable=False)
    is_parent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    currency: Mapped[Currency] = mapped_column(Enum(Currency), default=Currency.JOD, nullable=False)

    # Fixed at creation from account_type
    normal_balance: Mapped[BalanceType] = mapped_column(Enum(BalanceType), nullable=False)

    opening_balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    opening_balance_type: Mapped[BalanceType | None] = mapped_column(Enum(BalanceType), nullable=True)

    # Signed per normal_balance
    current_balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"), nullable=False)
    has_transactions: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    parent_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=True,
    )

    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    parent: Mapped["Account | None"] = relationship(
        "Account",
        remote_side="Account.id",
        back_populates="children",
    )
    children: Mapped[list["Account"]] = relationship(
        "Account",
        back_populates="parent",
        order_by="Account.code",
    )

    __table_args__ = (
        UniqueConstraint("code", name="uq_accounts_code"),
        Index("idx_accounts_parent_id", "parent_id"),
        Index("idx_accounts_type_code", "account_type", "code"),
    )

    def __repr__(self) -> str:
        return f"<Account {self.code} {self.name} balance={self.current_balance}>"
