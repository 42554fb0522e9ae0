"""Ledger schema: accounts, journal entries, lines, transactions, exchange rate

Revision ID: 001_ledger
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '001_ledger'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(*values, name):
    return postgresql.ENUM(*values, name=name, create_type=False)


def upgrade() -> None:
    # Create enums (with IF NOT EXISTS check)
    op.execute("DO $$ BEGIN CREATE TYPE accounttype AS ENUM ('ASSET', 'LIABILITY', 'EQUITY', 'REVENUE', 'EXPENSE'); EXCEPTION WHEN duplicate_object THEN null; END $$;")
    op.execute("DO $$ BEGIN CREATE TYPE balancetype AS ENUM ('DEBIT', 'CREDIT'); EXCEPTION WHEN duplicate_object THEN null; END $$;")
    op.execute("DO $$ BEGIN CREATE TYPE currency AS ENUM ('JOD', 'USDT'); EXCEPTION WHEN duplicate_object THEN null; END $$;")
    op.execute("DO $$ BEGIN CREATE TYPE journalstatus AS ENUM ('POSTED', 'VOIDED'); EXCEPTION WHEN duplicate_object THEN null; END $$;")

    account_type = _enum('ASSET', 'LIABILITY', 'EQUITY', 'REVENUE', 'EXPENSE', name='accounttype')
    balance_type = _enum('DEBIT', 'CREDIT', name='balancetype')
    currency = _enum('JOD', 'USDT', name='currency')
    journal_status = _enum('POSTED', 'VOIDED', name='journalstatus')

    # Accounts
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('account_type', account_type, nullable=False),
        sa.Column('is_parent', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('currency', currency, nullable=False, server_default='JOD'),
        sa.Column('normal_balance', balance_type, nullable=False),
        sa.Column('opening_balance', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('opening_balance_type', balance_type, nullable=True),
        sa.Column('current_balance', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('has_transactions', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('created_by', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['parent_id'], ['accounts.id']),
        sa.UniqueConstraint('code', name='uq_accounts_code'),
    )
    op.create_index('idx_accounts_parent_id', 'accounts', ['parent_id'])
    op.create_index('idx_accounts_type_code', 'accounts', ['account_type', 'code'])

    # Journal Entries
    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('entry_number', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('reference', sa.String(100), nullable=True),
        sa.Column('status', journal_status, nullable=False, server_default='POSTED'),
        sa.Column('total_debits_jod', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('total_credits_jod', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('total_debits_usdt', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('total_credits_usdt', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('created_by', sa.String(100), nullable=False),
        sa.Column('voided_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('entry_number', name='uq_journal_entries_entry_number'),
    )
    op.create_index('idx_journal_entries_date', 'journal_entries', ['date'])
    op.create_index('idx_journal_entries_status', 'journal_entries', ['status'])

    # Journal Lines
    op.create_table(
        'journal_lines',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('journal_entry_id', sa.Uuid(), nullable=False),
        sa.Column('line_number', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('debit_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('credit_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('currency', currency, nullable=False),
        sa.Column('exchange_rate', sa.Numeric(18, 6), nullable=False),
        sa.Column('converted_amount_jod', sa.Numeric(18, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['journal_entry_id'], ['journal_entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.CheckConstraint('debit_amount >= 0', name='check_debit_non_negative'),
        sa.CheckConstraint('credit_amount >= 0', name='check_credit_non_negative'),
    )
    op.create_index('idx_journal_lines_account_id', 'journal_lines', ['account_id'])

    # Ledger Transactions
    op.create_table(
        'ledger_transactions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('journal_entry_id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('posting_order', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('type', balance_type, nullable=False),
        sa.Column('currency', currency, nullable=False),
        sa.Column('exchange_rate', sa.Numeric(18, 6), nullable=False),
        sa.Column('balance_before', sa.Numeric(18, 2), nullable=False),
        sa.Column('balance_after', sa.Numeric(18, 2), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['journal_entry_id'], ['journal_entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.CheckConstraint('amount > 0', name='check_transaction_amount_positive'),
    )
    op.create_index('idx_ledger_transactions_entry', 'ledger_transactions', ['journal_entry_id'])
    op.create_index('idx_ledger_transactions_account', 'ledger_transactions', ['account_id'])

    # Exchange rate (single row)
    op.create_table(
        'exchange_rates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rate', sa.Numeric(18, 6), nullable=False),
        sa.Column('updated_by', sa.String(100), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )

    # Sequences
    op.create_table(
        'ledger_sequences',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('next_value', sa.BigInteger(), nullable=False, server_default='1'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_ledger_sequences_name'),
    )
    op.execute("INSERT INTO ledger_sequences (name, next_value) VALUES ('journal_entry_number', 1)")


def downgrade() -> None:
    op.drop_table('ledger_sequences')
    op.drop_table('exchange_rates')
    op.drop_index('idx_ledger_transactions_account', table_name='ledger_transactions')
    op.drop_index('idx_ledger_transactions_entry', table_name='ledger_transactions')
    op.drop_table('ledger_transactions')
    op.drop_index('idx_journal_lines_account_id', table_name='journal_lines')
    op.drop_table('journal_lines')
    op.drop_index('idx_journal_entries_status', table_name='journal_entries')
    op.drop_index('idx_journal_entries_date', table_name='journal_entries')
    op.drop_table('journal_entries')
    op.drop_index('idx_accounts_type_code', table_name='accounts')
    op.drop_index('idx_accounts_parent_id', table_name='accounts')
    op.drop_table('accounts')

    op.execute("DROP TYPE IF EXISTS journalstatus")
    op.execute("DROP TYPE IF EXISTS currency")
    op.execute("DROP TYPE IF EXISTS balancetype")
    op.execute("DROP TYPE IF EXISTS accounttype")
