"""
Security infrastructure components.
"""
from .password_hasher import (
    HashlibKeyDerivation,
    LEGACY_SCHEME,
    Pbkdf2PasswordHasher,
    format_scheme,
    parse_scheme,
)
from .jwt_handler import JWTHandler

__all__ = [
    'HashlibKeyDerivation',
    'LEGACY_SCHEME',
    'Pbkdf2PasswordHasher',
    'format_scheme',
    'parse_scheme',
    'JWTHandler',
]
