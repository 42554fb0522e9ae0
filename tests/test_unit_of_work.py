"""Tests for the unit of work and contention detection."""

import pytest
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.models.accounting import ExchangeRate, EXCHANGE_RATE_ROW_ID
from app.db.unit_of_work import is_contention_error, unit_of_work
from app.domain.accounting.errors import ConcurrencyConflict


class FakeDriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


class TestContentionDetection:

    @pytest.mark.parametrize("pgcode", ["40001", "40P01"])
    def test_serialization_and_deadlock(self, pgcode):
        error = OperationalError("UPDATE accounts", {}, FakeDriverError("could not serialize", pgcode))
        assert is_contention_error(error) is True

    def test_unique_entry_number(self):
        error = IntegrityError(
            "INSERT", {}, FakeDriverError('duplicate key value violates unique constraint "uq_journal_entries_entry_number"')
        )
        assert is_contention_error(error) is True

    def test_sqlite_unique_message(self):
        error = IntegrityError("INSERT", {}, FakeDriverError("UNIQUE constraint failed: journal_entries.entry_number"))
        assert is_contention_error(error) is True

    def test_other_integrity_errors(self):
        error = IntegrityError("INSERT", {}, FakeDriverError("CHECK constraint failed: check_debit_non_negative"))
        assert is_contention_error(error) is False

    def test_other_operational_errors(self):
        error = OperationalError("SELECT", {}, FakeDriverError("no such table: accounts"))
        assert is_contention_error(error) is False


class TestUnitOfWork:

    def test_commits_on_success(self, db):
        with unit_of_work(db):
            db.add(ExchangeRate(id=EXCHANGE_RATE_ROW_ID, rate=Decimal("0.71"), updated_by="test"))

        db.expire_all()
        assert db.scalar(select(func.count()).select_from(ExchangeRate)) == 1

    def test_rolls_back_on_error(self, db):
        with pytest.raises(RuntimeError):
            with unit_of_work(db):
                db.add(ExchangeRate(id=EXCHANGE_RATE_ROW_ID, rate=Decimal("0.71"), updated_by="test"))
                db.flush()
                raise RuntimeError("boom")

        assert db.scalar(select(func.count()).select_from(ExchangeRate)) == 0

    def test_duplicate_singleton_is_a_conflict(self, db):
        with unit_of_work(db):
            db.add(ExchangeRate(id=EXCHANGE_RATE_ROW_ID, rate=Decimal("0.71"), updated_by="test"))
        db.expunge_all()

        with pytest.raises(ConcurrencyConflict):
            with unit_of_work(db):
                db.add(ExchangeRate(id=EXCHANGE_RATE_ROW_ID, rate=Decimal("0.72"), updated_by="test"))

        assert db.scalar(select(ExchangeRate.rate)) == Decimal("0.71")
