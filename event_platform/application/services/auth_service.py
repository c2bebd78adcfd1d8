"""
Identity application service: registration, sign-in and token refresh.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..interfaces.services import EventPublisher, PasswordHasher, TokenService
from ..interfaces.unit_of_work import UnitOfWork
from ...domain.entities.base import AggregateRoot
from ...domain.entities.user import User
from ...domain.exceptions import InvalidArgumentException
from ...logging_config import log_command

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Result of identity operations."""
    success: bool
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class RegisterCommand:
    """User registration request data."""
    username: str
    password: str


@dataclass
class AuthenticateCommand:
    """Sign-in request data."""
    username: str
    password: str


@dataclass
class RefreshTokenCommand:
    """Refresh token exchange request data."""
    refresh_token: str


class AuthService:
    """
    Identity service handling user registration, sign-in and refresh token
    rotation.

    Credential derivation is CPU bound, so it always runs on a worker thread
    to keep the event loop responsive.
    """

    INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
    INVALID_REFRESH_TOKEN_MESSAGE = "Invalid refresh token"

    def __init__(
        self,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        event_publisher: Optional[EventPublisher] = None,
    ):
        self._password_hasher = password_hasher
        self._token_service = token_service
        self._event_publisher = event_publisher

    @log_command
    async def register(
        self,
        command: RegisterCommand,
        uow: UnitOfWork,
    ) -> AuthResult:
        """
        Register a new user.

        Args:
            command: Registration data
            uow: Unit of work for transaction management

        Returns:
            AuthResult with the created user, or DUPLICATE_USERNAME
        """
        username = command.username.strip()

        if await uow.users.username_exists(username):
            return AuthResult(
                success=False,
                error="Username already exists",
                error_code="DUPLICATE_USERNAME",
            )

        hashed = await asyncio.to_thread(self._password_hasher.hash_password, command.password)

        user = User.register(
            username=username,
            hashed=hashed,
            scheme=self._password_hasher.scheme,
        )

        saved_user = await uow.users.add(user)
        await uow.commit()

        await self._publish_events(user)

        logger.info("Registered user %s", saved_user.id)
        return AuthResult(
            success=True,
            user=saved_user,
        )

    @log_command
    async def authenticate(
        self,
        command: AuthenticateCommand,
        uow: UnitOfWork,
    ) -> AuthResult:
        """
        Verify credentials and issue tokens.

        An unknown username, a wrong password and a stored credential the
        hasher cannot use all produce the same result.
        Credentials stored under an outdated scheme are re-derived with the
        current one once the password has been verified.

        Args:
            command: Sign-in credentials
            uow: Unit of work for transaction management

        Returns:
            AuthResult with tokens and role names on success
        """
        user = await uow.users.get_by_username(command.username.strip())

        if user is None:
            return self._invalid_credentials()

        try:
            verified = await asyncio.to_thread(
                self._password_hasher.verify_password,
                command.password,
                user.password_hash,
                user.salt,
                user.password_scheme,
            )
        except InvalidArgumentException as exc:
            logger.error("Unusable credential for user %s: %s", user.id, exc.message)
            return self._invalid_credentials()
        if not verified:
            logger.info("Rejected sign-in for user %s", user.id)
            return self._invalid_credentials()

        if self._password_hasher.needs_rehash(user.password_scheme):
            hashed = await asyncio.to_thread(self._password_hasher.hash_password, command.password)
            user.change_credentials(hashed, self._password_hasher.scheme)
            logger.info("Upgraded credential scheme for user %s", user.id)

        access_token = self._token_service.create_access_token(
            user_id=user.id,
            username=user.username,
            roles=user.role_names,
        )
        refresh_token = self._token_service.create_refresh_token()
        user.record_login(refresh_token)

        await uow.users.update(user)
        await uow.commit()

        await self._publish_events(user)

        return AuthResult(
            success=True,
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            roles=user.role_names,
        )

    @log_command
    async def refresh_token(
        self,
        command: RefreshTokenCommand,
        uow: UnitOfWork,
    ) -> AuthResult:
        """
        Exchange a stored refresh token for a new access/refresh token pair.

        Args:
            command: The refresh token issued at sign-in or last refresh
            uow: Unit of work for transaction management

        Returns:
            AuthResult with the new token pair
        """
        user = await uow.users.get_by_refresh_token(command.refresh_token)

        if user is None:
            return AuthResult(
                success=False,
                error=self.INVALID_REFRESH_TOKEN_MESSAGE,
                error_code="INVALID_REFRESH_TOKEN",
            )

        access_token = self._token_service.create_access_token(
            user_id=user.id,
            username=user.username,
            roles=user.role_names,
        )
        new_refresh_token = self._token_service.create_refresh_token()
        user.rotate_refresh_token(new_refresh_token)

        await uow.users.update(user)
        await uow.commit()

        await self._publish_events(user)

        return AuthResult(
            success=True,
            user=user,
            access_token=access_token,
            refresh_token=new_refresh_token,
            roles=user.role_names,
        )

    def _invalid_credentials(self) -> AuthResult:
        return AuthResult(
            success=False,
            error=self.INVALID_CREDENTIALS_MESSAGE,
            error_code="INVALID_CREDENTIALS",
        )

    async def _publish_events(self, aggregate: AggregateRoot) -> None:
        events = aggregate.clear_domain_events()
        if self._event_publisher and events:
            await self._event_publisher.publish_many(events)
