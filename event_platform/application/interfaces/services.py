"""
External service interfaces (ports).

These interfaces define contracts for services the application
depends on without tying it to a particular library.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from ...domain.value_objects import HashedPassword


class KeyDerivation(ABC):
    """Source of random salts and password-based key derivation."""

    @abstractmethod
    def generate_salt(self, size: int) -> bytes:
        """Return ``size`` bytes from a cryptographically secure generator."""
        pass

    @abstractmethod
    def derive_key(
        self,
        password: str,
        salt: bytes,
        iterations: int,
        prf: str,
        key_size: int,
    ) -> bytes:
        """Derive ``key_size`` bytes from ``password`` and ``salt``."""
        pass


class PasswordHasher(ABC):
    """Interface for password credential derivation and verification."""

    @property
    @abstractmethod
    def scheme(self) -> str:
        """Tag describing the parameters new credentials are derived with."""
        pass

    @abstractmethod
    def hash_password(self, password: str) -> HashedPassword:
        """Derive a new credential with a fresh salt."""
        pass

    @abstractmethod
    def verify_password(
        self,
        password: str,
        digest: str,
        salt: bytes,
        scheme: Optional[str] = None,
    ) -> bool:
        """
        Check a candidate password against a stored credential.

        ``scheme`` names the parameters the credential was derived with;
        ``None`` means a record stored before schemes were recorded.
        """
        pass

    @abstractmethod
    def needs_rehash(self, scheme: Optional[str]) -> bool:
        """Whether a credential stored under ``scheme`` should be re-derived."""
        pass


class TokenService(ABC):
    """Interface for access and refresh token issuing."""

    @abstractmethod
    def create_access_token(
        self,
        user_id: UUID,
        username: str,
        roles: Sequence[str] = (),
    ) -> str:
        """Create a signed access token."""
        pass

    @abstractmethod
    def create_refresh_token(self) -> str:
        """Create an opaque random refresh token."""
        pass

    @abstractmethod
    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Decode and validate an access token, returning its claims."""
        pass


class EventPublisher(ABC):
    """Interface for publishing domain events."""

    @abstractmethod
    async def publish(self, event: Any) -> None:
        """Publish a single domain event."""
        pass

    @abstractmethod
    async def publish_many(self, events: List[Any]) -> None:
        """Publish multiple domain events."""
        pass
