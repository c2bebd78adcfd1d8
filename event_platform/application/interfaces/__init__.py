"""
Application ports.
"""
from .repositories import Repository, UserRepository
from .services import EventPublisher, KeyDerivation, PasswordHasher, TokenService
from .unit_of_work import UnitOfWork

__all__ = [
    'Repository',
    'UserRepository',
    'EventPublisher',
    'KeyDerivation',
    'PasswordHasher',
    'TokenService',
    'UnitOfWork',
]
