"""
SQLAlchemy Unit of Work implementation.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...application.interfaces.unit_of_work import UnitOfWork
from .repositories.user_repository import SQLAlchemyUserRepository

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    One ``AsyncSession`` per ``async with`` block.

    The user repository is bound to that session on entry, so every lookup
    and write made through ``users`` lands in the same transaction. Using the
    unit of work outside its block raises ``RuntimeError``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._users: Optional[SQLAlchemyUserRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        if self._session is not None:
            raise RuntimeError("Unit of work is already active")
        self._session = self._session_factory()
        self._users = SQLAlchemyUserRepository(self._session)
        return self

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work not started. Use 'async with' context.")
        return self._session

    @property
    def users(self) -> SQLAlchemyUserRepository:
        if self._users is None:
            raise RuntimeError("Unit of work not started. Use 'async with' context.")
        return self._users

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("Rolled back unit of work")

    async def close(self) -> None:
        if self._session is None:
            return
        session, self._session, self._users = self._session, None, None
        await session.close()
