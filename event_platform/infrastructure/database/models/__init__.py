"""
SQLAlchemy ORM models.
"""
from .base import Base, BaseModel, TimestampMixin, UUIDMixin
from .user_model import RoleModel, UserModel, user_roles

__all__ = [
    'Base',
    'BaseModel',
    'TimestampMixin',
    'UUIDMixin',
    'RoleModel',
    'UserModel',
    'user_roles',
]
