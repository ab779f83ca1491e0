"""BalanceService — read-only affordability check against the cached snapshot.

Never writes and never touches the ledger. The snapshot read is a plain
committed read: a writer committing at the same instant may make the answer
stale by one operation, but it is never a partially applied state.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_account.domain.repository import AccountStoreProtocol
from src.pt_account.infrastructure.persistence import AccountRepository
from src.pt_balance.application.schemas import CheckBalanceResponse
from src.pt_common.errors import AccountNotFoundError, AccountSuspendedError
from src.pt_transaction.domain.validation import require_caller, validate_amount


class BalanceService:
    def __init__(self, accounts: AccountStoreProtocol | None = None) -> None:
        self._accounts: AccountStoreProtocol = accounts or AccountRepository()

    async def check_balance(
        self, db: AsyncSession, caller_id: str | None, amount: object
    ) -> CheckBalanceResponse:
        account_id = require_caller(caller_id)
        points = validate_amount(amount)

        account = await self._accounts.get_account(db, account_id)
        if account is None:
            raise AccountNotFoundError()
        if account.is_suspended:
            raise AccountSuspendedError("Account is suspended")
        return CheckBalanceResponse(
            allowed=account.can_afford(points),
            balance=account.balance_snapshot,
        )
