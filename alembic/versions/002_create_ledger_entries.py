"""002: create ledger_entries table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ledger_id = account_id || '_' || reference_id; the PK is the idempotency guard
    op.execute("""
        CREATE TABLE ledger_entries (
            ledger_id       VARCHAR(257)    PRIMARY KEY,
            account_id      VARCHAR(128)    NOT NULL REFERENCES accounts (account_id),
            entry_type      VARCHAR(10)     NOT NULL,
            source          VARCHAR(16)     NOT NULL,
            reference_id    VARCHAR(128)    NOT NULL,
            amount          BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL,
            CONSTRAINT ck_ledger_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_ledger_entry_type  CHECK (entry_type IN ('CREDIT', 'DEBIT')),
            CONSTRAINT ck_ledger_source      CHECK (source IN ('PAYMENT', 'GAME', 'ADMIN'))
        );
    """)
    op.execute(
        "CREATE INDEX idx_ledger_account_time ON ledger_entries (account_id, created_at);"
    )
    # Append-only: reject UPDATE/DELETE at the database level too
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_ledger_entries_immutable()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'ledger_entries is append-only';
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_ledger_entries_immutable
            BEFORE UPDATE OR DELETE ON ledger_entries
            FOR EACH ROW EXECUTE FUNCTION fn_ledger_entries_immutable();
    """)
    op.execute("COMMENT ON TABLE ledger_entries IS 'Points ledger — Append-Only, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_ledger_entries_immutable();")
