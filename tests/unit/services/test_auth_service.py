"""
Unit tests for AuthService.

Tests registration, sign-in with credential upgrade, and refresh token
rotation against an in-memory unit of work.
"""
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from event_platform.application.services.auth_service import (
    AuthenticateCommand,
    AuthService,
    RefreshTokenCommand,
    RegisterCommand,
)
from event_platform.domain.events import (
    UserAuthenticated,
    UserCredentialsRehashed,
    UserRefreshTokenRotated,
    UserRegistered,
)
from event_platform.domain.exceptions import CryptoUnavailableException
from event_platform.infrastructure.security import Pbkdf2PasswordHasher

from factories import DEFAULT_PASSWORD, RoleFactory, UserFactory


@pytest.fixture
def service(password_hasher, jwt_handler, event_publisher):
    """Create an AuthService with real hashing and a mock publisher."""
    return AuthService(
        password_hasher=password_hasher,
        token_service=jwt_handler,
        event_publisher=event_publisher,
    )


def published_events(event_publisher):
    return [
        event
        for call in event_publisher.publish_many.await_args_list
        for event in call.args[0]
    ]


class TestRegister:
    """Test user registration."""

    @pytest.mark.asyncio
    async def test_register_stores_verifiable_credential(
        self, service, uow, user_store, password_hasher
    ):
        """Test the stored digest and salt verify the password."""
        result = await service.register(
            RegisterCommand(username="alice", password="Tr0ub4dor&3"), uow
        )

        assert result.success is True
        stored = user_store.users[result.user.id]
        assert len(stored.salt) == 16
        assert stored.password_scheme == "pbkdf2-sha256:10000"
        assert stored.roles == []
        assert password_hasher.verify_password(
            "Tr0ub4dor&3", stored.password_hash, stored.salt, stored.password_scheme
        )
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_register_strips_username(self, service, uow):
        result = await service.register(
            RegisterCommand(username="  alice  ", password="secret1"), uow
        )

        assert result.user.username == "alice"

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, service, uow, user_store):
        """Test a taken username is reported without writing."""
        existing = UserFactory(username="alice")
        user_store.users[existing.id] = existing

        result = await service.register(
            RegisterCommand(username="alice", password="secret1"), uow
        )

        assert result.success is False
        assert result.error_code == "DUPLICATE_USERNAME"
        assert len(user_store.users) == 1
        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_register_publishes_event(self, service, uow, event_publisher):
        await service.register(RegisterCommand(username="alice", password="secret1"), uow)

        events = published_events(event_publisher)
        assert len(events) == 1
        assert isinstance(events[0], UserRegistered)
        assert events[0].username == "alice"

    @pytest.mark.asyncio
    async def test_register_crypto_unavailable_propagates(self, jwt_handler, uow):
        """Test randomness failure aborts registration."""
        hasher = MagicMock()
        hasher.hash_password.side_effect = CryptoUnavailableException()
        service = AuthService(password_hasher=hasher, token_service=jwt_handler)

        with pytest.raises(CryptoUnavailableException):
            await service.register(RegisterCommand(username="alice", password="secret1"), uow)

        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_register_log_redacts_password(self, service, uow, caplog):
        """Test the command log never contains the password."""
        with caplog.at_level(logging.INFO):
            await service.register(RegisterCommand(username="alice", password="Tr0ub4dor&3"), uow)

        assert "Handling RegisterCommand" in caplog.text
        for record in caplog.records:
            assert "Tr0ub4dor&3" not in str(getattr(record, "context", ""))
            assert "Tr0ub4dor&3" not in record.getMessage()


class TestAuthenticate:
    """Test sign-in."""

    @pytest.mark.asyncio
    async def test_authenticate_success(self, service, uow, user_store, jwt_handler):
        """Test valid credentials issue tokens and record the login."""
        user = UserFactory(username="alice", roles=[RoleFactory(name="Admin")])
        user_store.users[user.id] = user

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert result.success is True
        assert result.roles == ["Admin"]
        claims = jwt_handler.decode_token(result.access_token)
        assert claims["sub"] == str(user.id)
        assert claims["role"] == ["Admin"]
        assert user_store.users[user.id].refresh_token == result.refresh_token
        assert user_store.users[user.id].last_login_at is not None
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, service, uow, user_store):
        user = UserFactory(username="alice")
        user_store.users[user.id] = user

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password="wrong"), uow
        )

        assert result.success is False
        assert result.error_code == "INVALID_CREDENTIALS"
        assert result.access_token is None
        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_unknown_user_matches_wrong_password(self, service, uow, user_store):
        """Test unknown usernames are indistinguishable from bad passwords."""
        user = UserFactory(username="alice")
        user_store.users[user.id] = user

        unknown = await service.authenticate(
            AuthenticateCommand(username="mallory", password="x"), uow
        )
        wrong = await service.authenticate(
            AuthenticateCommand(username="alice", password="x"), uow
        )

        assert unknown.error == wrong.error == "Invalid username or password"
        assert unknown.error_code == wrong.error_code

    @pytest.mark.asyncio
    async def test_legacy_record_without_scheme_verifies(self, service, uow, user_store):
        """Test records stored before schemes existed still sign in."""
        user = UserFactory(username="alice", password_scheme=None)
        user_store.users[user.id] = user

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert result.success is True

    @pytest.mark.asyncio
    async def test_outdated_scheme_is_upgraded(
        self, jwt_handler, event_publisher, uow, user_store
    ):
        """Test a stronger configured scheme re-derives the credential on login."""
        user = UserFactory(username="alice")
        old_digest = user.password_hash
        user_store.users[user.id] = user
        stronger = Pbkdf2PasswordHasher(iterations=20000)
        service = AuthService(
            password_hasher=stronger,
            token_service=jwt_handler,
            event_publisher=event_publisher,
        )

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert result.success is True
        stored = user_store.users[user.id]
        assert stored.password_scheme == "pbkdf2-sha256:20000"
        assert stored.password_hash != old_digest
        assert stronger.verify_password(
            DEFAULT_PASSWORD, stored.password_hash, stored.salt, stored.password_scheme
        )
        event_types = [type(e) for e in published_events(event_publisher)]
        assert UserCredentialsRehashed in event_types
        assert UserAuthenticated in event_types

    @pytest.mark.asyncio
    async def test_current_scheme_is_not_rehashed(self, service, uow, user_store):
        user = UserFactory(username="alice")
        old_digest = user.password_hash
        user_store.users[user.id] = user

        await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert user_store.users[user.id].password_hash == old_digest

    @pytest.mark.asyncio
    async def test_unusable_stored_salt_is_invalid_credentials(self, service, uow, user_store, caplog):
        """Test a corrupted record fails like a wrong password and is logged."""
        user = UserFactory(username="alice")
        user.salt = b"\x00" * 8
        user_store.users[user.id] = user

        with caplog.at_level(logging.ERROR):
            result = await service.authenticate(
                AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
            )

        assert result.success is False
        assert result.error_code == "INVALID_CREDENTIALS"
        assert uow.commits == 0
        assert f"Unusable credential for user {user.id}" in caplog.text

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_authenticate(self, service, uow, user_store):
        user = UserFactory(username="alice")
        user.mark_deleted()
        user_store.users[user.id] = user

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert result.success is False
        assert result.error_code == "INVALID_CREDENTIALS"


class TestRefreshToken:
    """Test refresh token rotation."""

    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, service, uow, user_store, event_publisher):
        """Test the old refresh token stops working after exchange."""
        user = UserFactory(username="alice", refresh_token="old-token")
        user_store.users[user.id] = user

        result = await service.refresh_token(RefreshTokenCommand(refresh_token="old-token"), uow)

        assert result.success is True
        assert result.refresh_token != "old-token"
        assert user_store.users[user.id].refresh_token == result.refresh_token
        assert isinstance(published_events(event_publisher)[-1], UserRefreshTokenRotated)

        replay = await service.refresh_token(RefreshTokenCommand(refresh_token="old-token"), uow)
        assert replay.success is False
        assert replay.error_code == "INVALID_REFRESH_TOKEN"

    @pytest.mark.asyncio
    async def test_refresh_unknown_token(self, service, uow):
        result = await service.refresh_token(RefreshTokenCommand(refresh_token="nope"), uow)

        assert result.success is False
        assert result.error == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_refresh(self, service, uow, user_store):
        user = UserFactory(username="alice", refresh_token="old-token")
        user.is_deleted = True
        user_store.users[user.id] = user

        result = await service.refresh_token(RefreshTokenCommand(refresh_token="old-token"), uow)

        assert result.success is False
        assert result.error_code == "INVALID_REFRESH_TOKEN"


class TestUnitOfWorkInteraction:
    """Test the service against a mocked unit of work."""

    @pytest.mark.asyncio
    async def test_failed_sign_in_does_not_commit(self, service):
        uow = MagicMock()
        uow.users.get_by_username = AsyncMock(return_value=None)
        uow.commit = AsyncMock()

        result = await service.authenticate(
            AuthenticateCommand(username="ghost", password="pw"), uow
        )

        assert result.success is False
        uow.users.get_by_username.assert_awaited_once_with("ghost")
        uow.commit.assert_not_awaited()


class TestWorkerThreads:
    """Test credential derivation stays off the event loop."""

    @pytest.fixture
    def to_thread(self):
        async def run_inline(func, *args):
            return func(*args)

        with patch(
            "event_platform.application.services.auth_service.asyncio.to_thread",
            AsyncMock(side_effect=run_inline),
        ) as mock:
            yield mock

    @pytest.mark.asyncio
    async def test_register_derives_on_worker_thread(self, service, uow, password_hasher, to_thread):
        await service.register(RegisterCommand(username="alice", password="secret1"), uow)

        to_thread.assert_awaited_once()
        func, password = to_thread.await_args.args
        assert func == password_hasher.hash_password
        assert password == "secret1"

    @pytest.mark.asyncio
    async def test_authenticate_verifies_on_worker_thread(
        self, service, uow, user_store, password_hasher, to_thread
    ):
        user = UserFactory(username="alice")
        user_store.users[user.id] = user

        result = await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        assert result.success is True
        to_thread.assert_awaited_once()
        func, *args = to_thread.await_args.args
        assert func == password_hasher.verify_password
        assert args == [DEFAULT_PASSWORD, user.password_hash, user.salt, user.password_scheme]

    @pytest.mark.asyncio
    async def test_rehash_derives_on_worker_thread(self, jwt_handler, uow, user_store, to_thread):
        user = UserFactory(username="alice")
        user_store.users[user.id] = user
        stronger = Pbkdf2PasswordHasher(iterations=20000)
        service = AuthService(password_hasher=stronger, token_service=jwt_handler)

        await service.authenticate(
            AuthenticateCommand(username="alice", password=DEFAULT_PASSWORD), uow
        )

        funcs = [call.args[0] for call in to_thread.await_args_list]
        assert funcs == [stronger.verify_password, stronger.hash_password]
