"""Unified error codes and custom exceptions.

Every error carries a numeric code, a stable machine-readable kind and a
human-readable message. Routers never build error payloads by hand; the
AppError handler in src/main.py renders them.

Error code ranges:
  1xxx: Auth
  2xxx: Validation
  3xxx: Account
  4xxx: Ledger
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: str = "internal",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind = kind
        super().__init__(message)


# --- 1xxx: Auth ---

class UnauthenticatedError(AppError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(1001, message, 401, "unauthenticated")


# --- 2xxx: Validation ---

class InvalidArgumentError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(2001, message, 400, "invalid-argument")


# --- 3xxx: Account ---

class AccountNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(3001, "Account not found", 404, "not-found")


class FailedPreconditionError(AppError):
    """A business rule rejected the operation; nothing was written."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422, "failed-precondition")


class AccountSuspendedError(FailedPreconditionError):
    def __init__(self, message: str = "Account is suspended") -> None:
        super().__init__(3002, message)


class InsufficientBalanceError(FailedPreconditionError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(3003, "Insufficient balance")
        self.required = required
        self.available = available


# --- 4xxx: Ledger ---

class LedgerEntryExistsError(AppError):
    def __init__(self, ledger_id: str) -> None:
        super().__init__(4001, f"Ledger entry already exists: {ledger_id}", 409, "already-exists")
        self.ledger_id = ledger_id


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, "internal")


class StaleSnapshotError(AppError):
    """Compare-and-swap on the account version lost a race; the unit is retried."""

    def __init__(self, account_id: str, expected_version: int) -> None:
        super().__init__(
            9003,
            f"Account {account_id} changed concurrently (expected version {expected_version})",
            409,
            "aborted",
        )


class TransactionAbortedError(AppError):
    def __init__(self, attempts: int) -> None:
        super().__init__(
            9004,
            f"Transaction aborted after {attempts} attempts due to contention, retry later",
            409,
            "aborted",
        )
