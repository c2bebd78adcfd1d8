"""
Test data factories for the identity service.
"""
from .user_factory import DEFAULT_PASSWORD, RoleFactory, UserFactory

__all__ = [
    "DEFAULT_PASSWORD",
    "RoleFactory",
    "UserFactory",
]
