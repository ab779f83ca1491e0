"""Request validation for ledger operations.

Every check here runs before any storage access: a failure must leave no
trace, not even a logged query. Messages are part of the API contract.
"""

import math

from src.pt_common.enums import LedgerSource
from src.pt_common.errors import InvalidArgumentError, UnauthenticatedError

MAX_ID_LENGTH = 128
MAX_POINTS_AMOUNT = 10**12


def require_caller(caller_id: str | None) -> str:
    """Return the authenticated caller id or raise UnauthenticatedError."""
    if not isinstance(caller_id, str) or not caller_id:
        raise UnauthenticatedError()
    if len(caller_id) > MAX_ID_LENGTH:
        raise InvalidArgumentError(f"callerId must be at most {MAX_ID_LENGTH} characters")
    return caller_id


def validate_amount(amount: object) -> int:
    """Accept a finite, positive, whole number of points.

    bool is rejected even though it subclasses int. Integral floats (e.g. 10.0,
    as JSON clients often send) are normalized to int.

    Stricter than "finite and > 0": balances are stored as integer points,
    so 0.5 is an InvalidArgument here rather than a fractional credit.
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidArgumentError("amount must be a positive number")
    if isinstance(amount, float):
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidArgumentError("amount must be a positive number")
        if not amount.is_integer():
            raise InvalidArgumentError("amount must be a whole number of points")
        amount = int(amount)
    if amount <= 0:
        raise InvalidArgumentError("amount must be a positive number")
    if amount > MAX_POINTS_AMOUNT:
        raise InvalidArgumentError("amount exceeds the maximum allowed")
    return amount


def validate_reference_id(reference_id: object) -> str:
    if not isinstance(reference_id, str) or not reference_id:
        raise InvalidArgumentError("referenceId is required")
    if len(reference_id) > MAX_ID_LENGTH:
        raise InvalidArgumentError(f"referenceId must be at most {MAX_ID_LENGTH} characters")
    return reference_id


def validate_source(source: object, allowed: tuple[LedgerSource, ...]) -> LedgerSource:
    for candidate in allowed:
        if source == candidate.value:
            return candidate
    names = " or ".join(s.value for s in allowed)
    raise InvalidArgumentError(f"source must be {names}")
