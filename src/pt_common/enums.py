"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class LedgerEntryType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class LedgerSource(str, Enum):
    PAYMENT = "PAYMENT"
    GAME = "GAME"
    ADMIN = "ADMIN"


# Sources each entry type accepts, in the order used by error messages
CREDIT_SOURCES: tuple[LedgerSource, ...] = (LedgerSource.PAYMENT, LedgerSource.ADMIN)
DEBIT_SOURCES: tuple[LedgerSource, ...] = (LedgerSource.GAME, LedgerSource.ADMIN)
