"""Fixtures for API tests.

The app runs in-process through httpx's ASGI transport. The lifespan is not
started; dependencies are pointed at the per-test SQLite database instead.
"""

import httpx
import pytest

from barter.infrastructure.auth import get_jwt_manager
from barter.main import app
from barter.presentation.api import dependencies


@pytest.fixture
async def client(session_factory):
    dependencies.init_dependencies(session_factory=session_factory)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth():
    """``auth(user_id)`` → Authorization header with a fresh access token."""

    def _headers(user_id: int) -> dict[str, str]:
        token = get_jwt_manager().create_access_token(user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
