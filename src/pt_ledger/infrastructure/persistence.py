"""LedgerRepository — concrete implementation of LedgerStoreProtocol.

append() relies on the ledger_id primary key: a duplicate key surfaces as
LedgerEntryExistsError. The INSERT runs inside a SAVEPOINT so the caller's
transaction survives the conflict and can decide what to do with it.
"""

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_common.datetime_utils import as_utc
from src.pt_common.enums import LedgerEntryType, LedgerSource
from src.pt_common.errors import LedgerEntryExistsError
from src.pt_ledger.domain.models import LedgerEntry
from src.pt_ledger.infrastructure.db_models import LedgerEntryORM

_ledger = LedgerEntryORM.__table__

_LEDGER_COLUMNS = (
    _ledger.c.ledger_id,
    _ledger.c.account_id,
    _ledger.c.entry_type,
    _ledger.c.source,
    _ledger.c.reference_id,
    _ledger.c.amount,
    _ledger.c.created_at,
)


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        ledger_id=row.ledger_id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        entry_type=LedgerEntryType(row.entry_type),  # type: ignore[attr-defined]
        source=LedgerSource(row.source),  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=as_utc(row.created_at),  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Append-only store. Exposes no update or delete."""

    async def exists(self, db: AsyncSession, ledger_id: str) -> bool:
        result = await db.execute(
            select(_ledger.c.ledger_id).where(_ledger.c.ledger_id == ledger_id)
        )
        return result.first() is not None

    async def get_entry(
        self, db: AsyncSession, ledger_id: str
    ) -> LedgerEntry | None:
        result = await db.execute(
            select(*_LEDGER_COLUMNS).where(_ledger.c.ledger_id == ledger_id)
        )
        row = result.fetchone()
        return _row_to_ledger(row) if row else None

    async def append(self, db: AsyncSession, entry: LedgerEntry) -> LedgerEntry:
        try:
            async with db.begin_nested():
                await db.execute(
                    insert(_ledger).values(
                        ledger_id=entry.ledger_id,
                        account_id=entry.account_id,
                        entry_type=entry.entry_type.value,
                        source=entry.source.value,
                        reference_id=entry.reference_id,
                        amount=entry.amount,
                        created_at=entry.created_at,
                    )
                )
        except IntegrityError as exc:
            raise LedgerEntryExistsError(entry.ledger_id) from exc
        return entry

    async def list_for_account(
        self, db: AsyncSession, account_id: str
    ) -> list[LedgerEntry]:
        result = await db.execute(
            select(*_LEDGER_COLUMNS)
            .where(_ledger.c.account_id == account_id)
            .order_by(_ledger.c.created_at, _ledger.c.ledger_id)
        )
        return [_row_to_ledger(row) for row in result.fetchall()]
