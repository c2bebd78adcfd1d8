"""
Shared pytest fixtures for identity service tests.

Provides fixtures for:
- Credential hashing and token services
- Mock database sessions (async SQLAlchemy)
- In-memory unit of work
- API client (httpx)
"""
import os
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
import pytest_asyncio

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

from event_platform.application.interfaces.repositories import UserRepository  # noqa: E402
from event_platform.application.interfaces.unit_of_work import UnitOfWork  # noqa: E402
from event_platform.domain.entities.user import User  # noqa: E402
from event_platform.domain.exceptions import EntityNotFoundException  # noqa: E402
from event_platform.infrastructure.security import JWTHandler, Pbkdf2PasswordHasher  # noqa: E402


TEST_SECRET_KEY = "TestSecretKeyForUnitTestsOnly-0123456789"
TEST_ISSUER = "EventManagementPlatform"


# ============================================================================
# In-memory persistence
# ============================================================================

class InMemoryUserRepository(UserRepository):
    """Dictionary-backed user repository shared across units of work."""

    def __init__(self, users: Optional[Dict[UUID, User]] = None):
        self.users: Dict[UUID, User] = users if users is not None else {}

    def _active(self):
        return (u for u in self.users.values() if not u.is_deleted)

    async def get_by_id(self, id: UUID) -> Optional[User]:
        return self.users.get(id)

    async def get_by_username(self, username: str, include_deleted: bool = False) -> Optional[User]:
        candidates = self.users.values() if include_deleted else self._active()
        return next((u for u in candidates if u.username == username), None)

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        if not refresh_token:
            return None
        return next((u for u in self._active() if u.refresh_token == refresh_token), None)

    async def username_exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def add(self, entity: User) -> User:
        self.users[entity.id] = entity
        return entity

    async def update(self, entity: User) -> User:
        if entity.id not in self.users:
            raise EntityNotFoundException('User', entity.id)
        self.users[entity.id] = entity
        return entity

    async def delete(self, id: UUID) -> bool:
        return self.users.pop(id, None) is not None


class InMemoryUnitOfWork(UnitOfWork):
    """Unit of work over an in-memory repository that counts commits."""

    def __init__(self, repository: InMemoryUserRepository):
        self._users = repository
        self.commits = 0
        self.rollbacks = 0

    @property
    def users(self) -> InMemoryUserRepository:
        return self._users

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def close(self) -> None:
        pass


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def password_hasher() -> Pbkdf2PasswordHasher:
    """Hasher with the production defaults."""
    return Pbkdf2PasswordHasher()


@pytest.fixture
def jwt_handler() -> JWTHandler:
    return JWTHandler(
        secret_key=TEST_SECRET_KEY,
        access_token_expire_minutes=15,
        issuer=TEST_ISSUER,
        audience=TEST_ISSUER,
    )


@pytest.fixture
def event_publisher():
    publisher = AsyncMock()
    publisher.publish = AsyncMock()
    publisher.publish_many = AsyncMock()
    return publisher


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_session():
    """
    Mock database session for repository tests.

    Returns an AsyncMock that can be configured per test.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_store() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def uow(user_store) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(user_store)


# ============================================================================
# API Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def api_client(user_store):
    """
    Test API client backed by the in-memory user store.

    The application lifespan is not run, so no database is required.
    """
    import httpx

    from event_platform.api.dependencies import get_unit_of_work
    from event_platform.main import app

    async def override_unit_of_work():
        yield InMemoryUnitOfWork(user_store)

    app.dependency_overrides[get_unit_of_work] = override_unit_of_work

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
