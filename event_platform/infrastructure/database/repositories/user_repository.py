"""
SQLAlchemy implementation of UserRepository.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ....application.interfaces.repositories import UserRepository
from ....domain.entities.user import User
from ....domain.exceptions import DuplicateEntityException, EntityNotFoundException
from ..models.user_model import RoleModel, UserModel

logger = logging.getLogger(__name__)

# Soft-deleted users never match a sign-in or refresh lookup.
ACTIVE = UserModel.is_deleted.is_(False)


class SQLAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, id: UUID) -> Optional[User]:
        """Get user by ID."""
        model = await self._get_model(id)
        return model.to_domain() if model else None

    async def get_by_username(self, username: str, include_deleted: bool = False) -> Optional[User]:
        """Get user by exact username."""
        query = select(UserModel).where(UserModel.username == username)
        if not include_deleted:
            query = query.where(ACTIVE)
        result = await self._session.execute(query)
        model = result.scalar_one_or_none()
        return model.to_domain() if model else None

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        """Get the active user holding ``refresh_token``."""
        if not refresh_token:
            return None
        result = await self._session.execute(
            select(UserModel).where(UserModel.refresh_token == refresh_token, ACTIVE)
        )
        model = result.scalar_one_or_none()
        return model.to_domain() if model else None

    async def username_exists(self, username: str) -> bool:
        """Check if username is registered to an active user."""
        result = await self._session.execute(
            select(func.count()).select_from(UserModel).where(
                UserModel.username == username,
                ACTIVE,
            )
        )
        count = result.scalar()
        return bool(count)

    async def add(self, entity: User) -> User:
        """
        Add new user, linking any roles that already exist.

        A concurrent registration that wins the unique username index first
        surfaces here as ``DuplicateEntityException``.
        """
        model = UserModel.from_domain(entity)
        if entity.roles:
            result = await self._session.execute(
                select(RoleModel).where(RoleModel.id.in_([role.id for role in entity.roles]))
            )
            model.roles = list(result.scalars().all())
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            logger.info("Insert rejected for username %r: %s", entity.username, exc.orig)
            raise DuplicateEntityException('User', 'username', entity.username) from exc
        return model.to_domain()

    async def update(self, entity: User) -> User:
        """Update existing user."""
        model = await self._get_model(entity.id)
        if model is None:
            raise EntityNotFoundException('User', entity.id)
        model.update_from_domain(entity)
        await self._session.flush()
        return model.to_domain()

    async def delete(self, id: UUID) -> bool:
        """Delete user by ID."""
        model = await self._get_model(id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _get_model(self, id: UUID) -> Optional[UserModel]:
        result = await self._session.execute(
            select(UserModel).where(UserModel.id == id)
        )
        return result.scalar_one_or_none()
