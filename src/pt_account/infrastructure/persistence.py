"""AccountRepository — concrete implementation of AccountStoreProtocol.

Snapshot writes are compare-and-swap UPDATEs guarded by the version column.
A result of 0 rows means another unit committed first (StaleSnapshotError).

Transaction ownership: The CALLER (TransactionCoordinator / BalanceService) is
responsible for committing or rolling back the session.
"""

import logging
from datetime import datetime

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_account.domain.models import Account
from src.pt_account.infrastructure.db_models import AccountORM
from src.pt_common.datetime_utils import as_utc, utc_now
from src.pt_common.enums import AccountStatus
from src.pt_common.errors import InternalError, StaleSnapshotError

logger = logging.getLogger(__name__)

_accounts = AccountORM.__table__

_ACCOUNT_COLUMNS = (
    _accounts.c.account_id,
    _accounts.c.status,
    _accounts.c.balance_snapshot,
    _accounts.c.version,
    _accounts.c.created_at,
    _accounts.c.updated_at,
)


def _row_to_account(row: object) -> Account:
    return Account(
        account_id=row.account_id,  # type: ignore[attr-defined]
        status=AccountStatus(row.status),  # type: ignore[attr-defined]
        balance_snapshot=row.balance_snapshot,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=as_utc(row.created_at),  # type: ignore[attr-defined]
        updated_at=as_utc(row.updated_at),  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: Core statements, portable across PostgreSQL and SQLite."""

    async def get_account(
        self, db: AsyncSession, account_id: str, for_update: bool = False
    ) -> Account | None:
        stmt = select(*_ACCOUNT_COLUMNS).where(_accounts.c.account_id == account_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def create_account_if_absent(
        self, db: AsyncSession, account_id: str
    ) -> Account:
        existing = await self.get_account(db, account_id)
        if existing is not None:
            return existing

        now = utc_now()
        try:
            # Savepoint: a concurrent creator winning the PK race must not
            # poison the caller's transaction.
            async with db.begin_nested():
                await db.execute(
                    insert(_accounts).values(
                        account_id=account_id,
                        status=AccountStatus.ACTIVE.value,
                        balance_snapshot=0,
                        version=0,
                        created_at=now,
                        updated_at=now,
                    )
                )
        except IntegrityError:
            logger.info("Account creation race lost, reusing winner: account_id=%s", account_id)
        else:
            logger.info("Account created: account_id=%s", account_id)

        account = await self.get_account(db, account_id)
        if account is None:
            raise InternalError(f"Account {account_id} missing right after creation")
        return account

    async def apply_delta(
        self,
        db: AsyncSession,
        account_id: str,
        delta: int,
        expected_version: int,
        now: datetime,
    ) -> None:
        result = await db.execute(
            update(_accounts)
            .where(
                _accounts.c.account_id == account_id,
                _accounts.c.version == expected_version,
            )
            .values(
                balance_snapshot=_accounts.c.balance_snapshot + delta,
                version=_accounts.c.version + 1,
                updated_at=now,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise StaleSnapshotError(account_id, expected_version)

    async def set_status(
        self,
        db: AsyncSession,
        account_id: str,
        status: AccountStatus,
        now: datetime,
    ) -> Account | None:
        await db.execute(
            update(_accounts)
            .where(_accounts.c.account_id == account_id)
            .values(
                status=status.value,
                version=_accounts.c.version + 1,
                updated_at=now,
            )
        )
        return await self.get_account(db, account_id)

    async def list_account_ids(self, db: AsyncSession) -> list[str]:
        result = await db.execute(
            select(_accounts.c.account_id).order_by(_accounts.c.account_id)
        )
        return [row.account_id for row in result.fetchall()]
