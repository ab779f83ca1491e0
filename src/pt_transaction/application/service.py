"""TransactionCoordinator — the only writer of accounts and ledger_entries.

Each credit/debit runs as one atomic unit on the caller's session:

    lock account → status check → idempotency check → balance check
    → append ledger entry → compare-and-swap snapshot → commit

Any exception rolls the whole unit back, so a rejected debit or a failed
append never leaves a half-written ledger. StaleSnapshotError means another
unit on the same account committed first; the unit is then re-run from a
fresh read, up to settings.TX_MAX_ATTEMPTS times.

Validation and the caller check run before the session is touched.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pt_account.domain.models import Account
from src.pt_account.domain.repository import AccountStoreProtocol
from src.pt_account.infrastructure.persistence import AccountRepository
from src.pt_common.datetime_utils import utc_now
from src.pt_common.enums import (
    CREDIT_SOURCES,
    DEBIT_SOURCES,
    AccountStatus,
    LedgerEntryType,
    LedgerSource,
)
from src.pt_common.errors import (
    AccountNotFoundError,
    AccountSuspendedError,
    InsufficientBalanceError,
    InvalidArgumentError,
    LedgerEntryExistsError,
    StaleSnapshotError,
    TransactionAbortedError,
)
from src.pt_ledger.domain.models import LedgerEntry, make_ledger_id
from src.pt_ledger.domain.repository import LedgerStoreProtocol
from src.pt_ledger.infrastructure.persistence import LedgerRepository
from src.pt_transaction.application.schemas import MutationResponse, OpenAccountResponse
from src.pt_transaction.domain.validation import (
    require_caller,
    validate_amount,
    validate_reference_id,
    validate_source,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Mutation:
    account_id: str
    entry_type: LedgerEntryType
    source: LedgerSource
    reference_id: str
    amount: int

    @property
    def ledger_id(self) -> str:
        return make_ledger_id(self.account_id, self.reference_id)


class TransactionCoordinator:
    def __init__(
        self,
        accounts: AccountStoreProtocol | None = None,
        ledger: LedgerStoreProtocol | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._accounts: AccountStoreProtocol = accounts or AccountRepository()
        self._ledger: LedgerStoreProtocol = ledger or LedgerRepository()
        self._max_attempts = max_attempts or settings.TX_MAX_ATTEMPTS

    async def open_account(
        self, db: AsyncSession, caller_id: str | None
    ) -> OpenAccountResponse:
        account_id = require_caller(caller_id)
        try:
            account = await self._accounts.create_account_if_absent(db, account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return OpenAccountResponse(account_id=account.account_id, status=account.status)

    async def credit(
        self,
        db: AsyncSession,
        caller_id: str | None,
        amount: object,
        reference_id: object,
        source: object,
    ) -> MutationResponse:
        mutation = _Mutation(
            account_id=require_caller(caller_id),
            amount=validate_amount(amount),
            reference_id=validate_reference_id(reference_id),
            source=validate_source(source, CREDIT_SOURCES),
            entry_type=LedgerEntryType.CREDIT,
        )
        await self._run_unit(db, mutation)
        return MutationResponse()

    async def debit(
        self,
        db: AsyncSession,
        caller_id: str | None,
        amount: object,
        reference_id: object,
        source: object,
    ) -> MutationResponse:
        mutation = _Mutation(
            account_id=require_caller(caller_id),
            amount=validate_amount(amount),
            reference_id=validate_reference_id(reference_id),
            source=validate_source(source, DEBIT_SOURCES),
            entry_type=LedgerEntryType.DEBIT,
        )
        await self._run_unit(db, mutation)
        return MutationResponse()

    async def set_account_status(
        self, db: AsyncSession, account_id: str, status: AccountStatus
    ) -> Account:
        """Administrative suspend/reactivate. The snapshot is left untouched."""
        if not account_id:
            raise InvalidArgumentError("accountId is required")
        try:
            account = await self._accounts.set_status(db, account_id, AccountStatus(status), utc_now())
            if account is None:
                raise AccountNotFoundError()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account status changed: account_id=%s status=%s", account_id, account.status.value)
        return account

    # ------------------------------------------------------------------
    # Atomic unit
    # ------------------------------------------------------------------

    async def _run_unit(self, db: AsyncSession, mutation: _Mutation) -> bool:
        """Run the mutation to commit; True if written, False on idempotent replay."""
        for attempt in range(1, self._max_attempts + 1):
            try:
                applied = await self._apply_once(db, mutation)
                await db.commit()
            except StaleSnapshotError:
                await db.rollback()
                logger.warning(
                    "Concurrent write on account, retrying: ledger_id=%s attempt=%d/%d",
                    mutation.ledger_id,
                    attempt,
                    self._max_attempts,
                )
                continue
            except InsufficientBalanceError as exc:
                await db.rollback()
                logger.info(
                    "Debit rejected: ledger_id=%s required=%d available=%d",
                    mutation.ledger_id,
                    exc.required,
                    exc.available,
                )
                raise
            except Exception:
                await db.rollback()
                raise
            return applied

        logger.error(
            "Giving up after %d attempts: ledger_id=%s", self._max_attempts, mutation.ledger_id
        )
        raise TransactionAbortedError(self._max_attempts)

    async def _apply_once(self, db: AsyncSession, mutation: _Mutation) -> bool:
        account = await self._accounts.get_account(db, mutation.account_id, for_update=True)
        if account is None:
            raise AccountNotFoundError()
        if account.is_suspended:
            verb = mutation.entry_type.value.lower()
            raise AccountSuspendedError(f"Cannot {verb} suspended account")

        ledger_id = mutation.ledger_id
        if await self._ledger.exists(db, ledger_id):
            await self._confirm_replay(db, mutation)
            return False

        if mutation.entry_type == LedgerEntryType.DEBIT and not account.can_afford(mutation.amount):
            raise InsufficientBalanceError(mutation.amount, account.balance_snapshot)

        now = utc_now()
        entry = LedgerEntry(
            ledger_id=ledger_id,
            account_id=mutation.account_id,
            entry_type=mutation.entry_type,
            source=mutation.source,
            reference_id=mutation.reference_id,
            amount=mutation.amount,
            created_at=now,
        )
        try:
            await self._ledger.append(db, entry)
        except LedgerEntryExistsError as exc:
            # Another unit claimed this key after our exists() check.
            raise StaleSnapshotError(account.account_id, account.version) from exc
        await self._accounts.apply_delta(
            db, account.account_id, entry.signed_amount, account.version, now
        )
        logger.info(
            "Ledger entry applied: ledger_id=%s type=%s amount=%d",
            ledger_id,
            entry.entry_type.value,
            entry.amount,
        )
        return True

    async def _confirm_replay(self, db: AsyncSession, mutation: _Mutation) -> None:
        existing = await self._ledger.get_entry(db, mutation.ledger_id)
        if existing is None or existing.account_id != mutation.account_id:
            # "a_b" + "c" and "a" + "b_c" share a key; never replay another account's entry
            raise LedgerEntryExistsError(mutation.ledger_id)
        if not existing.same_request(mutation.entry_type, mutation.source, mutation.amount):
            logger.warning(
                "Replay payload differs from stored entry, keeping stored: ledger_id=%s "
                "stored=%s/%s/%d replay=%s/%s/%d",
                mutation.ledger_id,
                existing.entry_type.value,
                existing.source.value,
                existing.amount,
                mutation.entry_type.value,
                mutation.source.value,
                mutation.amount,
            )
        logger.info("Idempotent replay: ledger_id=%s", mutation.ledger_id)
