"""
Identity API endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ..dependencies import (
    get_auth_service,
    get_current_claims,
    get_jwt_handler,
    get_unit_of_work,
)
from ..schemas.identity_schemas import (
    AuthenticateRequest,
    AuthenticateResponse,
    CurrentUserResponse,
    ErrorResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    RegisterResponse,
)
from ...application.interfaces.unit_of_work import UnitOfWork
from ...application.services.auth_service import (
    AuthenticateCommand,
    AuthService,
    RefreshTokenCommand,
    RegisterCommand,
)
from ...domain.exceptions import AuthenticationException, DuplicateEntityException
from ...infrastructure.security import JWTHandler

router = APIRouter(prefix="/identity", tags=["Identity"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Username already exists"},
        422: {"description": "Validation error"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Register a new user account.

    The account is created without roles.
    """
    result = await auth_service.register(
        RegisterCommand(username=request.username, password=request.password),
        uow,
    )

    if not result.success:
        raise DuplicateEntityException('User', 'username', request.username)

    return RegisterResponse(
        user_id=result.user.id,
        username=result.user.username,
    )


@router.post(
    "/authenticate",
    response_model=AuthenticateResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def authenticate(
    request: AuthenticateRequest,
    auth_service: AuthService = Depends(get_auth_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
):
    """
    Authenticate with username and password.

    Returns an access token, a refresh token and the user's role names.
    """
    result = await auth_service.authenticate(
        AuthenticateCommand(username=request.username, password=request.password),
        uow,
    )

    if not result.success:
        raise AuthenticationException(result.error)

    return AuthenticateResponse(
        user_id=result.user.id,
        username=result.user.username,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        roles=result.roles,
        expires_in=jwt_handler.access_token_expires_in,
    )


@router.post(
    "/refresh-token",
    response_model=RefreshTokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid refresh token"},
    },
)
async def refresh_token(
    request: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
):
    """
    Exchange a refresh token for a new access/refresh token pair.

    The presented refresh token stops working once exchanged.
    """
    result = await auth_service.refresh_token(
        RefreshTokenCommand(refresh_token=request.refresh_token),
        uow,
    )

    if not result.success:
        raise AuthenticationException(result.error)

    return RefreshTokenResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=jwt_handler.access_token_expires_in,
    )


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def current_user(
    claims: Dict[str, Any] = Depends(get_current_claims),
):
    """Return the identity carried by the bearer token."""
    return CurrentUserResponse(
        user_id=claims["sub"],
        username=claims["unique_name"],
        roles=claims.get("role", []),
    )
