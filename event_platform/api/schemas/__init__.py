"""
API request/response schemas.
"""
from .identity_schemas import (
    AuthenticateRequest,
    AuthenticateResponse,
    CurrentUserResponse,
    ErrorResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    'AuthenticateRequest',
    'AuthenticateResponse',
    'CurrentUserResponse',
    'ErrorResponse',
    'RefreshTokenRequest',
    'RefreshTokenResponse',
    'RegisterRequest',
    'RegisterResponse',
]
