"""Reconcile every account snapshot against its ledger.

Usage:
    python run_ledger_audit.py                 # audit all accounts
    python run_ledger_audit.py --account u1    # audit one account
    python run_ledger_audit.py --init-sqlite   # create tables on a SQLite DATABASE_URL, then audit

Exit status is 1 when any violation is found.
"""

import argparse
import asyncio
import logging
import sys

from config.settings import settings
from src.pt_account.infrastructure import db_models as _account_tables  # noqa: F401
from src.pt_balance.domain.reconciliation import verify_account, verify_all_accounts
from src.pt_common.database import Base, async_session_factory, engine
from src.pt_ledger.infrastructure import db_models as _ledger_tables  # noqa: F401


async def _init_sqlite() -> None:
    if not settings.DATABASE_URL.startswith("sqlite"):
        raise SystemExit("--init-sqlite only applies to sqlite DATABASE_URL; use alembic upgrade head")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _audit(account_id: str | None) -> dict[str, list[str]]:
    async with async_session_factory() as db:
        if account_id is not None:
            violations = await verify_account(db, account_id)
            return {account_id: violations} if violations else {}
        return await verify_all_accounts(db)


async def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--account", help="audit a single account id")
    parser.add_argument("--init-sqlite", action="store_true")
    args = parser.parse_args(argv)

    try:
        if args.init_sqlite:
            await _init_sqlite()
        report = await _audit(args.account)
    finally:
        await engine.dispose()

    if not report:
        print("OK: every snapshot matches its ledger")
        return 0
    for account_id, violations in report.items():
        for msg in violations:
            print(f"{account_id}: {msg}")
    return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    sys.exit(asyncio.run(main(sys.argv[1:])))
