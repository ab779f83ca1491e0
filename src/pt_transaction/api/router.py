"""pt_transaction REST API — the three state-changing ledger operations.

All endpoints take the caller id from the bearer token; a missing token is
rejected by the coordinator with code 1001 before any storage access.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_common.database import get_db_session
from src.pt_common.response import ApiResponse, success_response
from src.pt_gateway.auth.dependencies import get_caller_id
from src.pt_transaction.application.schemas import PointsMutationRequest
from src.pt_transaction.application.service import TransactionCoordinator

router = APIRouter(tags=["ledger"])

_coordinator = TransactionCoordinator()


def _get_request_id(request: Request, resp: ApiResponse) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", resp.request_id)


@router.post("/account/open")
async def open_account(
    caller_id: Annotated[str | None, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _coordinator.open_account(db, caller_id)
    resp = success_response(data.model_dump(mode="json", by_alias=True))
    resp.request_id = _get_request_id(request, resp)
    return resp


@router.post("/points/credit")
async def credit_points(
    caller_id: Annotated[str | None, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: PointsMutationRequest | None = None,
) -> ApiResponse:
    body = body or PointsMutationRequest()
    data = await _coordinator.credit(
        db, caller_id, body.amount, body.reference_id, body.source
    )
    resp = success_response(data.model_dump())
    resp.request_id = _get_request_id(request, resp)
    return resp


@router.post("/points/debit")
async def debit_points(
    caller_id: Annotated[str | None, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: PointsMutationRequest | None = None,
) -> ApiResponse:
    body = body or PointsMutationRequest()
    data = await _coordinator.debit(
        db, caller_id, body.amount, body.reference_id, body.source
    )
    resp = success_response(data.model_dump())
    resp.request_id = _get_request_id(request, resp)
    return resp
