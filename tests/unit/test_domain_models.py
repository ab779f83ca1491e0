"""Unit tests for account and ledger domain models."""

from datetime import UTC, datetime

from src.pt_account.domain.models import Account
from src.pt_common.enums import AccountStatus, LedgerEntryType, LedgerSource
from src.pt_common.datetime_utils import as_utc
from src.pt_ledger.domain.models import LedgerEntry, make_ledger_id


def _entry(entry_type: LedgerEntryType, amount: int = 40) -> LedgerEntry:
    return LedgerEntry(
        ledger_id="u1_ref1",
        account_id="u1",
        entry_type=entry_type,
        source=LedgerSource.ADMIN,
        reference_id="ref1",
        amount=amount,
        created_at=datetime.now(UTC),
    )


class TestLedgerId:
    def test_format(self) -> None:
        assert make_ledger_id("u1", "ref1") == "u1_ref1"

    def test_deterministic(self) -> None:
        assert make_ledger_id("u1", "ref1") == make_ledger_id("u1", "ref1")


class TestLedgerEntry:
    def test_signed_amount(self) -> None:
        assert _entry(LedgerEntryType.CREDIT).signed_amount == 40
        assert _entry(LedgerEntryType.DEBIT).signed_amount == -40

    def test_same_request(self) -> None:
        entry = _entry(LedgerEntryType.CREDIT)
        assert entry.same_request(LedgerEntryType.CREDIT, LedgerSource.ADMIN, 40)
        assert not entry.same_request(LedgerEntryType.CREDIT, LedgerSource.ADMIN, 41)
        assert not entry.same_request(LedgerEntryType.DEBIT, LedgerSource.ADMIN, 40)
        assert not entry.same_request(LedgerEntryType.CREDIT, LedgerSource.PAYMENT, 40)


class TestAccount:
    def _account(self, balance: int, status: AccountStatus = AccountStatus.ACTIVE) -> Account:
        now = datetime.now(UTC)
        return Account("u1", status, balance, 0, now, now)

    def test_can_afford_is_inclusive(self) -> None:
        account = self._account(70)
        assert account.can_afford(70)
        assert not account.can_afford(71)

    def test_is_suspended(self) -> None:
        assert self._account(0, AccountStatus.SUSPENDED).is_suspended
        assert not self._account(0).is_suspended


def test_as_utc_attaches_timezone_to_naive() -> None:
    naive = datetime(2024, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is UTC
