"""FastAPI dependency: get_caller_id.

Usage in any ledger router:
    from src.pt_gateway.auth.dependencies import get_caller_id

    @router.post("/protected")
    async def protected(caller_id: str | None = Depends(get_caller_id)):
        ...

A request without a bearer token yields None; the core rejects it with
UnauthenticatedError before touching storage. A present but invalid token
is rejected here.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.pt_gateway.auth.jwt_handler import decode_caller_id

bearer_scheme = HTTPBearer(auto_error=False)


async def get_caller_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    return decode_caller_id(credentials.credentials)
