# Application Services
from .auth_service import (
    AuthService,
    AuthResult,
    AuthenticateCommand,
    RefreshTokenCommand,
    RegisterCommand,
)

__all__ = [
    'AuthService',
    'AuthResult',
    'AuthenticateCommand',
    'RefreshTokenCommand',
    'RegisterCommand',
]
