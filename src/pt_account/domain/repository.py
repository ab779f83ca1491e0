"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Only the Transaction Coordinator may call apply_delta and set_status.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_account.domain.models import Account
from src.pt_common.enums import AccountStatus


class AccountStoreProtocol(Protocol):
    async def get_account(
        self, db: AsyncSession, account_id: str, for_update: bool = False
    ) -> Account | None: ...

    async def create_account_if_absent(
        self, db: AsyncSession, account_id: str
    ) -> Account: ...

    async def apply_delta(
        self,
        db: AsyncSession,
        account_id: str,
        delta: int,
        expected_version: int,
        now: datetime,
    ) -> None: ...

    async def set_status(
        self,
        db: AsyncSession,
        account_id: str,
        status: AccountStatus,
        now: datetime,
    ) -> Account | None: ...

    async def list_account_ids(self, db: AsyncSession) -> list[str]: ...
