"""Ledger store Protocol. Append-only: there is deliberately no update or delete."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_ledger.domain.models import LedgerEntry


class LedgerStoreProtocol(Protocol):
    async def exists(self, db: AsyncSession, ledger_id: str) -> bool: ...

    async def get_entry(
        self, db: AsyncSession, ledger_id: str
    ) -> LedgerEntry | None: ...

    async def append(self, db: AsyncSession, entry: LedgerEntry) -> LedgerEntry: ...

    async def list_for_account(
        self, db: AsyncSession, account_id: str
    ) -> list[LedgerEntry]: ...
