"""
Development data seeded at application startup.
"""
import asyncio
import logging

from ...application.interfaces.services import PasswordHasher
from ...application.interfaces.unit_of_work import UnitOfWork
from ...config import AppSettings
from ...domain.entities.user import User
from ..security import Pbkdf2PasswordHasher
from .connection import get_unit_of_work

logger = logging.getLogger(__name__)


async def seed_admin_user(
    uow: UnitOfWork,
    password_hasher: PasswordHasher,
    username: str,
    password: str,
) -> bool:
    """
    Create the administrator account unless the username is already taken.

    Soft-deleted users count as taken, so a deleted administrator is not
    recreated.

    Returns:
        True if a user was created
    """
    existing = await uow.users.get_by_username(username, include_deleted=True)
    if existing is not None:
        logger.info("Admin user already exists, skipping seed")
        return False

    hashed = await asyncio.to_thread(password_hasher.hash_password, password)
    admin = User.register(
        username=username,
        hashed=hashed,
        scheme=password_hasher.scheme,
    )
    await uow.users.add(admin)
    await uow.commit()

    logger.info("Admin user %s created", admin.id)
    return True


async def seed_development_data(settings: AppSettings) -> None:
    """Run every development seed step in its own unit of work."""
    logger.info("Starting development seed")
    async with get_unit_of_work() as uow:
        await seed_admin_user(
            uow,
            Pbkdf2PasswordHasher.from_settings(settings.password_hashing),
            username=settings.seed.admin_username,
            password=settings.seed.admin_password,
        )
    logger.info("Development seed completed")
