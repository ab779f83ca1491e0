"""SQLAlchemy ORM models for pt_ledger.

These map to tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.pt_common.database import Base


class LedgerEntryORM(Base):
    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_amount_gt_0"),
        CheckConstraint("entry_type IN ('CREDIT', 'DEBIT')", name="ck_ledger_entry_type"),
        CheckConstraint("source IN ('PAYMENT', 'GAME', 'ADMIN')", name="ck_ledger_source"),
        Index("idx_ledger_account_time", "account_id", "created_at"),
    )

    # account_id (128) + "_" + reference_id (128)
    ledger_id: Mapped[str] = mapped_column(String(257), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("accounts.account_id"), nullable=False
    )
    entry_type: Mapped[str] = mapped_column(String(10), nullable=False)
    source: Mapped[str] = mapped_column(String(16), nullable=False)
    reference_id: Mapped[str] = mapped_column(String(128), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # NOTE: no updated_at, ledger_entries is append-only
