"""Pydantic schemas for pt_transaction API.

Request fields are loosely typed on purpose: amount/referenceId/source rules
live in pt_transaction.domain.validation so HTTP and in-process callers get
identical error messages. Field names follow the camelCase wire format.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.pt_common.enums import AccountStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PointsMutationRequest(BaseModel):
    """Body of POST /points/credit and POST /points/debit."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Any = None
    reference_id: Any = Field(None, alias="referenceId")
    source: Any = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class OpenAccountResponse(BaseModel):
    """Never exposes balance_snapshot or timestamps."""

    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="accountId")
    status: AccountStatus


class MutationResponse(BaseModel):
    status: Literal["OK"] = "OK"
