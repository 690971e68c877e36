from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def test_client(db_session, mock_redis) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with the test session and mocked Redis."""
    from backend.app.api.deps import get_db, get_redis
    from backend.app.main import app

    async def override_get_db():
        yield db_session

    def override_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_redis

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers(author) -> dict[str, str]:
    return {"X-User-Id": str(author.id)}
