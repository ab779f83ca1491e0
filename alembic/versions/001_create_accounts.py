"""001: create accounts table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE accounts (
            account_id          VARCHAR(128) PRIMARY KEY,
            status              VARCHAR(16)  NOT NULL DEFAULT 'ACTIVE',
            balance_snapshot    BIGINT       NOT NULL DEFAULT 0,
            version             BIGINT       NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ  NOT NULL,
            updated_at          TIMESTAMPTZ  NOT NULL,
            CONSTRAINT ck_accounts_balance_gte_0 CHECK (balance_snapshot >= 0),
            CONSTRAINT ck_accounts_status        CHECK (status IN ('ACTIVE', 'SUSPENDED'))
        );
    """)
    op.execute(
        "COMMENT ON TABLE accounts IS "
        "'Points accounts — balance_snapshot is the running total of ledger_entries';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
