"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy import text

from config.settings import settings
from src.pt_balance.api.router import router as balance_router
from src.pt_common.database import engine
from src.pt_common.datetime_utils import utc_now
from src.pt_common.errors import AppError, InvalidArgumentError, UnauthenticatedError
from src.pt_common.response import error_response
from src.pt_gateway.middleware.request_log import RequestLogMiddleware
from src.pt_transaction.api.router import router as ledger_router

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.kind)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


def _has_bearer_token(request: Request) -> bool:
    """Same test HTTPBearer applies before handing credentials to get_caller_id."""
    scheme, credentials = get_authorization_scheme_param(request.headers.get("Authorization"))
    return scheme.lower() == "bearer" and bool(credentials)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Body is not a JSON object at all; field rules are enforced by the core.
    # A missing caller still outranks a bad payload.
    if not _has_bearer_token(request):
        return _error_json(request, UnauthenticatedError())
    return _error_json(request, InvalidArgumentError("Invalid request payload"))


app.include_router(ledger_router, prefix="/api/v1")
app.include_router(balance_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {
        "status": "ok",
        "service": "points-ledger",
        "version": APP_VERSION,
        "timestamp": utc_now().isoformat(),
    }
