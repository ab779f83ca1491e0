"""Shared test fixtures.

Settings are read at import time, so test defaults must be in the
environment before anything under src/ or config/ is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import Callable  # noqa: E402

import pytest  # noqa: E402

from src.pt_gateway.auth.jwt_handler import create_access_token  # noqa: E402


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Build Authorization headers carrying a valid token for a caller id."""

    def _headers(caller_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(caller_id)}"}

    return _headers
