"""Domain models for pt_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pt_common.enums import LedgerEntryType, LedgerSource


def make_ledger_id(account_id: str, reference_id: str) -> str:
    """Deterministic dedup key: retries of one request collide on the same row."""
    return f"{account_id}_{reference_id}"


@dataclass(frozen=True)
class LedgerEntry:
    ledger_id: str               # make_ledger_id(account_id, reference_id)
    account_id: str
    entry_type: LedgerEntryType
    source: LedgerSource
    reference_id: str            # caller-supplied idempotency token
    amount: int                  # points, always positive; sign comes from entry_type
    created_at: datetime

    @property
    def signed_amount(self) -> int:
        if self.entry_type == LedgerEntryType.CREDIT:
            return self.amount
        return -self.amount

    def same_request(self, entry_type: LedgerEntryType, source: LedgerSource, amount: int) -> bool:
        """True if a replayed request carries the payload this entry was written with."""
        return (
            self.entry_type == entry_type
            and self.source == source
            and self.amount == amount
        )
