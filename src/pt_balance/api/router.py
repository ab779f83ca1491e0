"""pt_balance REST API — read-only affordability check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pt_balance.application.schemas import CheckBalanceRequest
from src.pt_balance.application.service import BalanceService
from src.pt_common.database import get_db_session
from src.pt_common.response import ApiResponse, success_response
from src.pt_gateway.auth.dependencies import get_caller_id

router = APIRouter(prefix="/balance", tags=["balance"])

_service = BalanceService()


@router.post("/check")
async def check_balance(
    caller_id: Annotated[str | None, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: CheckBalanceRequest | None = None,
) -> ApiResponse:
    amount = body.amount if body is not None else None
    data = await _service.check_balance(db, caller_id, amount)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
