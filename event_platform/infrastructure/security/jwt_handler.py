"""
JWT token handling implementation.
"""
import base64
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

import jwt

from ...application.interfaces.services import TokenService
from ...config import JWTSettings
from ...domain.exceptions import CryptoUnavailableException

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


class JWTHandler(TokenService):
    """JWT token service implementation."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens
            algorithm: JWT signing algorithm
            access_token_expire_minutes: Access token validity period
            issuer: Token issuer claim
            audience: Token audience claim
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_token_expire_minutes = access_token_expire_minutes
        self._issuer = issuer
        self._audience = audience

    @classmethod
    def from_settings(cls, settings: JWTSettings) -> 'JWTHandler':
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            access_token_expire_minutes=settings.access_token_expire_minutes,
            issuer=settings.issuer,
            audience=settings.audience,
        )

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._access_token_expire_minutes * 60

    def create_access_token(
        self,
        user_id: UUID,
        username: str,
        roles: Sequence[str] = (),
    ) -> str:
        """Create a new access token."""
        now = datetime.now(timezone.utc)
        expires = now + timedelta(minutes=self._access_token_expire_minutes)

        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "unique_name": username,
            "exp": expires,
            "iat": now,
            "jti": str(uuid.uuid4()),
            "role": list(roles),
        }

        if self._issuer:
            payload["iss"] = self._issuer
        if self._audience:
            payload["aud"] = self._audience

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_refresh_token(self) -> str:
        """Create an opaque refresh token from 32 random bytes."""
        try:
            raw = secrets.token_bytes(REFRESH_TOKEN_BYTES)
        except (NotImplementedError, OSError) as exc:
            raise CryptoUnavailableException(original_error=str(exc)) from exc
        return base64.b64encode(raw).decode('ascii')

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify and decode an access token."""
        options: Dict[str, Any] = {}
        if self._audience:
            options["audience"] = self._audience
        if self._issuer:
            options["issuer"] = self._issuer

        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                **options
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired access token")
            return None
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected invalid access token: %s", exc)
            return None
