"""
Pytest configuration and shared fixtures for all tests.

This module provides:
- Database session fixtures with transaction rollback
- Mock Redis client for version event fan-out
- Repository and service fixtures
- Sample data factories
"""

import os
import sys
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import JSON
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add the workspace root to the Python path for absolute imports
workspace_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, workspace_root)

# Set test environment variables BEFORE importing app modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("LOG_DIR", "/tmp/test_logs")

# Monkey-patch JSONB to use JSON for SQLite compatibility
# This must be done before importing any models
from sqlalchemy.dialects import postgresql  # noqa: E402

postgresql.JSONB = JSON

from backend.app.config import Settings  # noqa: E402
from backend.app.domains.audit.models import AuditLog  # noqa: E402, F401
from backend.app.domains.document.models import Document  # noqa: E402, F401
from backend.app.domains.user.models import User  # noqa: E402, F401
from backend.app.domains.versioning.models import DocumentVersion  # noqa: E402, F401
from backend.app.infrastructure.database import Base  # noqa: E402

# ============================================================================
# Test Settings
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with in-memory database."""
    return Settings(
        app_env="test",
        database_url="sqlite+aiosqlite:///:memory:",
        redis_url="redis://localhost:6379/15",
        log_dir="/tmp/test_logs",
    )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session with automatic rollback after each test."""
    async_session_maker = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# Mock Redis Fixture
# ============================================================================


class MockRedisClient:
    """In-memory mock for Redis client."""

    def __init__(self):
        self.published: list[dict[str, Any]] = []

    def ping(self) -> bool:
        return True

    def notify_version_created(self, document_id, version_number: int, change_type: str, changed_by):
        self.published.append(
            {
                "event": "version_created",
                "document_id": str(document_id),
                "version_number": version_number,
                "change_type": change_type,
                "changed_by": str(changed_by),
            }
        )

    def close(self):
        pass

    def clear(self):
        self.published.clear()


@pytest.fixture
def mock_redis() -> MockRedisClient:
    """Provide a mock Redis client."""
    return MockRedisClient()


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def document_repository(db_session):
    """Create a document repository with test session."""
    from backend.app.domains.document.repository import DocumentRepository

    return DocumentRepository(db_session)


@pytest_asyncio.fixture
async def user_repository(db_session):
    from backend.app.domains.user.repository import UserRepository

    return UserRepository(db_session)


@pytest_asyncio.fixture
async def audit_repository(db_session):
    """Create an audit repository with test session."""
    from backend.app.domains.audit.repository import AuditRepository

    return AuditRepository(db_session)


@pytest_asyncio.fixture
async def version_store(db_session):
    """Create a version store with test session."""
    from backend.app.domains.versioning.repository import VersionStore

    return VersionStore(db_session)


# ============================================================================
# Sample Data Factories
# ============================================================================


@pytest_asyncio.fixture
async def author(db_session) -> User:
    """A persisted user acting as document author."""
    user = User(name="Ada Author", email="ada@example.com")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def editor(db_session) -> User:
    """A second persisted user editing someone else's document."""
    user = User(name="Eddie Editor", email="eddie@example.com")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
def sample_document_data():
    """Factory for creating document create payloads."""
    from backend.app.domains.document.schemas import DocumentCreate

    def _create(
        title: str = "Quarterly Report",
        content: str = "<p>Hello world</p>",
        visibility: str = "private",
    ) -> DocumentCreate:
        return DocumentCreate(title=title, content=content, visibility=visibility)

    return _create


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
