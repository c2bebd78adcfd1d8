"""
Persistence ports for the identity aggregates.
"""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar
from uuid import UUID

from ...domain.entities.user import User


T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """Identity-keyed storage for one aggregate type."""

    @abstractmethod
    async def get_by_id(self, id: UUID) -> Optional[T]:
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        """
        Stage a new aggregate for insertion.

        Raises:
            DuplicateEntityException: If a unique field is already taken.
        """
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """
        Write back the mutable state of a loaded aggregate.

        Raises:
            EntityNotFoundException: If no stored row has the entity's id.
        """
        pass

    @abstractmethod
    async def delete(self, id: UUID) -> bool:
        """Return False when nothing had that id."""
        pass


class UserRepository(Repository[User]):
    """
    User lookups needed by sign-in and token refresh.

    Usernames are matched exactly; callers strip surrounding whitespace.
    Soft-deleted users are invisible to every lookup unless
    ``include_deleted`` is passed.
    """

    @abstractmethod
    async def get_by_username(self, username: str, include_deleted: bool = False) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        """Find the active user currently holding ``refresh_token``, if any."""
        pass

    @abstractmethod
    async def username_exists(self, username: str) -> bool:
        pass
