"""
Transaction boundary port.
"""
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from .repositories import UserRepository


class UnitOfWork(ABC):
    """
    Groups the reads and writes of one identity operation.

    Services receive an already entered unit of work and call ``commit``
    once their changes are staged::

        async with uow:
            user = await uow.users.get_by_refresh_token(token)
            user.rotate_refresh_token(new_token)
            await uow.users.update(user)
            await uow.commit()

    Leaving the block through an exception rolls back before closing.
    """

    users: UserRepository

    async def __aenter__(self) -> 'UnitOfWork':
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType]
    ) -> None:
        if exc_type is not None:
            await self.rollback()
        await self.close()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass
