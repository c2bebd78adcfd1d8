"""
Database infrastructure - ORM models, repositories, and connection management.
"""
from .connection import (
    DatabaseManager,
    get_db_session,
    get_unit_of_work,
    init_db,
    health_check,
)
from .seed import seed_admin_user, seed_development_data
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    'DatabaseManager',
    'get_db_session',
    'get_unit_of_work',
    'init_db',
    'health_check',
    'SQLAlchemyUnitOfWork',
    'seed_admin_user',
    'seed_development_data',
]
