"""Domain models for pt_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pt_common.enums import AccountStatus


@dataclass
class Account:
    account_id: str              # == caller identity, immutable
    status: AccountStatus
    balance_snapshot: int        # points, materialized Σ CREDIT − Σ DEBIT
    version: int                 # bumped on every snapshot/status write
    created_at: datetime
    updated_at: datetime

    @property
    def is_suspended(self) -> bool:
        return self.status == AccountStatus.SUSPENDED

    def can_afford(self, amount: int) -> bool:
        return self.balance_snapshot >= amount
