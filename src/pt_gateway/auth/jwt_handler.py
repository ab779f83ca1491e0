"""JWT verification for caller identity.

Identity issuance belongs to the upstream auth provider; this service only
verifies HS256 bearer tokens and trusts their `sub` claim as the caller id.
create_access_token exists for local tooling and tests.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pt_common.errors import UnauthenticatedError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(caller_id: str) -> str:
    """Issue a short-lived access token (default: 30 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": caller_id,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_caller_id(token: str) -> str:
    """Decode a bearer token and return its subject.

    Raises:
        UnauthenticatedError: signature invalid, token expired, wrong token
            type, or no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token") from None

    if payload.get("type") != "access":
        raise UnauthenticatedError("Invalid or expired token")
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthenticatedError("Invalid or expired token")
    return subject
