"""Pydantic schemas for pt_balance API."""

from typing import Any

from pydantic import BaseModel


class CheckBalanceRequest(BaseModel):
    # Validated by validate_amount, not by pydantic, to keep one error contract
    amount: Any = None


class CheckBalanceResponse(BaseModel):
    allowed: bool
    balance: int
