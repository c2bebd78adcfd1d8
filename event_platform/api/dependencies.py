"""
FastAPI dependency injection providers.
"""
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..application.interfaces.services import EventPublisher, PasswordHasher
from ..application.interfaces.unit_of_work import UnitOfWork
from ..application.services.auth_service import AuthService
from ..config import get_settings
from ..infrastructure.database.connection import get_unit_of_work as create_unit_of_work
from ..infrastructure.events import LoggingEventPublisher
from ..infrastructure.security import JWTHandler, Pbkdf2PasswordHasher

# Security scheme
bearer_scheme = HTTPBearer(auto_error=False)


# Singleton instances for services
_password_hasher: Optional[Pbkdf2PasswordHasher] = None
_jwt_handler: Optional[JWTHandler] = None
_event_publisher: Optional[LoggingEventPublisher] = None


def get_password_hasher() -> PasswordHasher:
    """Get password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = Pbkdf2PasswordHasher.from_settings(get_settings().password_hashing)
    return _password_hasher


def get_jwt_handler() -> JWTHandler:
    """Get JWT handler instance."""
    global _jwt_handler
    if _jwt_handler is None:
        _jwt_handler = JWTHandler.from_settings(get_settings().jwt)
    return _jwt_handler


def get_event_publisher() -> EventPublisher:
    """Get domain event publisher instance."""
    global _event_publisher
    if _event_publisher is None:
        _event_publisher = LoggingEventPublisher()
    return _event_publisher


async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """
    Provide Unit of Work for request lifecycle.

    Handles transaction management per request.
    """
    uow = create_unit_of_work()
    async with uow:
        yield uow


def get_auth_service(
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> AuthService:
    """Get identity service instance."""
    return AuthService(
        password_hasher=password_hasher,
        token_service=jwt_handler,
        event_publisher=event_publisher,
    )


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
) -> Dict[str, Any]:
    """
    Get the claims of the presented bearer token.

    Raises HTTPException if the token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = jwt_handler.decode_token(credentials.credentials)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return claims
