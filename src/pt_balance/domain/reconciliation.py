"""Ledger replay audit: the snapshot must equal Σ CREDIT − Σ DEBIT.

Offline check only. The hot path never recomputes balances from the ledger;
this module proves the materialized snapshot and the ledger still agree.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_account.domain.repository import AccountStoreProtocol
from src.pt_account.infrastructure.persistence import AccountRepository
from src.pt_ledger.domain.models import LedgerEntry
from src.pt_ledger.domain.repository import LedgerStoreProtocol
from src.pt_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)


def replay_balance(entries: Iterable[LedgerEntry]) -> int:
    """Fold ledger entries into a balance: CREDIT adds, DEBIT subtracts."""
    return sum(entry.signed_amount for entry in entries)


def _replay_violations(account_id: str, snapshot: int, entries: list[LedgerEntry]) -> list[str]:
    violations: list[str] = []
    running = 0
    for entry in entries:
        if entry.account_id != account_id:
            violations.append(
                f"Ledger entry {entry.ledger_id} belongs to {entry.account_id}, not {account_id}"
            )
            continue
        running += entry.signed_amount
        if running < 0:
            violations.append(
                f"Running balance of {account_id} went negative ({running}) at {entry.ledger_id}"
            )
    if running != snapshot:
        violations.append(
            f"Snapshot mismatch for {account_id}: balance_snapshot={snapshot} "
            f"ledger_replay={running} over {len(entries)} entries"
        )
    return violations


async def verify_account(
    db: AsyncSession,
    account_id: str,
    accounts: AccountStoreProtocol | None = None,
    ledger: LedgerStoreProtocol | None = None,
) -> list[str]:
    """Return violation strings for one account (empty when consistent)."""
    accounts = accounts or AccountRepository()
    ledger = ledger or LedgerRepository()

    account = await accounts.get_account(db, account_id)
    if account is None:
        return [f"Account {account_id} does not exist"]
    entries = await ledger.list_for_account(db, account_id)
    violations = _replay_violations(account_id, account.balance_snapshot, entries)
    for msg in violations:
        logger.error(msg)
    return violations


async def verify_all_accounts(
    db: AsyncSession,
    accounts: AccountStoreProtocol | None = None,
    ledger: LedgerStoreProtocol | None = None,
) -> dict[str, list[str]]:
    """Audit every account; only accounts with violations appear in the result."""
    accounts = accounts or AccountRepository()
    ledger = ledger or LedgerRepository()

    report: dict[str, list[str]] = {}
    for account_id in await accounts.list_account_ids(db):
        violations = await verify_account(db, account_id, accounts, ledger)
        if violations:
            report[account_id] = violations
    return report
