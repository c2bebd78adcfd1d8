"""
User domain events.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from ..entities.base import DomainEvent


@dataclass(kw_only=True)
class UserRegistered(DomainEvent):
    """Event raised when a new user account is created."""
    user_id: UUID
    username: str

    @property
    def event_type(self) -> str:
        return "user.registered"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            'user_id': str(self.user_id),
            'username': self.username
        }


@dataclass(kw_only=True)
class UserAuthenticated(DomainEvent):
    """Event raised when a user signs in successfully."""
    user_id: UUID

    @property
    def event_type(self) -> str:
        return "user.authenticated"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            'user_id': str(self.user_id)
        }


@dataclass(kw_only=True)
class UserRefreshTokenRotated(DomainEvent):
    """Event raised when a refresh token is exchanged for a new one."""
    user_id: UUID

    @property
    def event_type(self) -> str:
        return "user.refresh_token_rotated"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            'user_id': str(self.user_id)
        }


@dataclass(kw_only=True)
class UserCredentialsRehashed(DomainEvent):
    """Event raised when a stored credential is re-derived under a new scheme."""
    user_id: UUID
    old_scheme: Optional[str]
    new_scheme: str

    @property
    def event_type(self) -> str:
        return "user.credentials_rehashed"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            'user_id': str(self.user_id),
            'old_scheme': self.old_scheme,
            'new_scheme': self.new_scheme
        }
