"""Shared fixtures: throwaway database and a sample chart of accounts."""

import os

# Point the app at a test database before any app module reads settings
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from app.models import Base
from app.db.session import SessionLocal, engine
from app.domain.accounting.account_service import create_account
from app.domain.accounting.enums import AccountType, Currency
from app.domain.accounting.inputs import AccountInput


@pytest.fixture(autouse=True)
def schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db() -> Session:
    """Provide database session for tests."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def chart(db: Session):
    """
    Sample chart of accounts.

        1000 Assets (parent)
            1001 USDT Wallet
            1100 Current Assets (parent)
                1101 Cash
                1102 Bank
        2000 Liabilities (parent)
            2001 Accounts Payable
        3001 Capital
        4000 Revenue (parent)
            4001 Sales
            4002 USDT Sales
        5001 Operating Expenses
    """
    def add(name, account_type, is_parent=False, parent=None, currency=Currency.JOD, **kwargs):
        return create_account(
            db,
            AccountInput(
                name=name,
                account_type=account_type,
                is_parent=is_parent,
                parent_id=parent.id if parent else None,
                currency=currency,
                **kwargs,
            ),
        )

    assets = add("Assets", AccountType.ASSET, is_parent=True)
    current_assets = add("Current Assets", AccountType.ASSET, is_parent=True, parent=assets)
    accounts = {
        "assets": assets,
        "current_assets": current_assets,
        "wallet": add("USDT Wallet", AccountType.ASSET, parent=assets, currency=Currency.USDT),
        "cash": add("Cash", AccountType.ASSET, parent=current_assets),
        "bank": add("Bank", AccountType.ASSET, parent=current_assets),
    }
    liabilities = add("Liabilities", AccountType.LIABILITY, is_parent=True)
    accounts["liabilities"] = liabilities
    accounts["payable"] = add("Accounts Payable", AccountType.LIABILITY, parent=liabilities)
    accounts["capital"] = add("Capital", AccountType.EQUITY)
    revenue = add("Revenue", AccountType.REVENUE, is_parent=True)
    accounts["revenue"] = revenue
    accounts["sales"] = add("Sales", AccountType.REVENUE, parent=revenue)
    accounts["usdt_sales"] = add("USDT Sales", AccountType.REVENUE, parent=revenue, currency=Currency.USDT)
    accounts["expenses"] = add("Operating Expenses", AccountType.EXPENSE)
    return accounts


@pytest.fixture
def read_balances(db: Session):
    """Return a function reading fresh balances of a dict of accounts, by key."""
    def read(accounts: dict) -> dict:
        db.expire_all()
        return {key: db.get(type(account), account.id).current_balance for key, account in accounts.items()}
    return read


@pytest.fixture
def assert_parents_consistent(db: Session):
    """Return a check that every parent account equals the sum of its children."""
    def check(accounts: dict) -> None:
        db.expire_all()
        for account in accounts.values():
            account = db.get(type(account), account.id)
            if account.is_parent:
                total = sum((child.current_balance for child in account.children), Decimal("0"))
                assert account.current_balance == total, account.code
    return check
