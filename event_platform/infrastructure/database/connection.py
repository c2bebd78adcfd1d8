"""
Database connection management (PostgreSQL).

Provides async SQLAlchemy engine and session management.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ...config import get_settings
from .models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages database connections and sessions.

    Holds the connection pool and provides the async session factory.
    """

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        """Get or create the async database engine."""
        if cls._engine is None:
            db = get_settings().database
            cls._engine = create_async_engine(
                db.url,
                echo=db.echo_sql,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if cls._session_factory is None:
            cls._session_factory = async_sessionmaker(
                bind=cls.get_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return cls._session_factory

    @classmethod
    async def close(cls) -> None:
        """Close the database engine and all connections."""
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._session_factory = None


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional scope around a series of operations.

    Usage:
        async with get_db_session() as session:
            session.add(entity)
    """
    session = DatabaseManager.get_session_factory()()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """
    Create missing tables.

    Called on application startup.
    """
    engine = DatabaseManager.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def health_check() -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database health check failed: %s", exc)
        return False


def get_unit_of_work():
    """
    Get a Unit of Work instance for transaction management.

    Usage:
        async with get_unit_of_work() as uow:
            user = await uow.users.get_by_username(username)
            await uow.commit()
    """
    from .unit_of_work import SQLAlchemyUnitOfWork
    return SQLAlchemyUnitOfWork(DatabaseManager.get_session_factory())
