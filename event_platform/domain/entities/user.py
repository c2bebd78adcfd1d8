"""
User aggregate and role entity.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import AggregateRoot, Entity, utc_now
from ..events.user_events import (
    UserAuthenticated,
    UserCredentialsRehashed,
    UserRefreshTokenRotated,
    UserRegistered,
)
from ..exceptions import ValidationException
from ..value_objects import HashedPassword


USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 100


@dataclass(kw_only=True, eq=False)
class Role(Entity):
    """A named role granted to users."""
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationException(
                message="Invalid role data",
                errors={'name': ['Role name is required']}
            )


@dataclass(kw_only=True, eq=False)
class User(AggregateRoot):
    """
    User aggregate root.

    Holds the credential record (digest, salt and the scheme they were
    derived with), the current refresh token and the granted roles. A
    soft-deleted user stays stored but can no longer sign in.
    """
    username: str
    password_hash: str = field(repr=False)
    salt: bytes = field(repr=False)
    password_scheme: Optional[str] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    roles: List[Role] = field(default_factory=list)
    last_login_at: Optional[datetime] = None
    is_deleted: bool = False

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        errors = {}

        username = (self.username or '').strip()
        if len(username) < USERNAME_MIN_LENGTH:
            errors['username'] = [f'Username must be at least {USERNAME_MIN_LENGTH} characters']
        elif len(username) > USERNAME_MAX_LENGTH:
            errors['username'] = [f'Username must not exceed {USERNAME_MAX_LENGTH} characters']

        if not self.password_hash:
            errors['password_hash'] = ['Password hash is required']

        if errors:
            raise ValidationException(
                message="Invalid user data",
                errors=errors
            )

    @property
    def credentials(self) -> HashedPassword:
        """Stored digest and salt."""
        return HashedPassword(digest=self.password_hash, salt=self.salt)

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]

    def record_login(self, refresh_token: str) -> None:
        """Record a successful sign-in and store the issued refresh token."""
        self.refresh_token = refresh_token
        self.last_login_at = utc_now()
        self.mark_updated()
        self.add_domain_event(UserAuthenticated(user_id=self.id))

    def rotate_refresh_token(self, refresh_token: str) -> None:
        """Replace the stored refresh token."""
        self.refresh_token = refresh_token
        self.mark_updated()
        self.add_domain_event(UserRefreshTokenRotated(user_id=self.id))

    def change_credentials(self, hashed: HashedPassword, scheme: str) -> None:
        """Replace digest, salt and scheme in one step."""
        old_scheme = self.password_scheme
        self.password_hash = hashed.digest
        self.salt = hashed.salt
        self.password_scheme = scheme
        self.mark_updated()
        self.add_domain_event(UserCredentialsRehashed(
            user_id=self.id,
            old_scheme=old_scheme,
            new_scheme=scheme
        ))

    def mark_deleted(self) -> None:
        """Soft-delete the user and drop its refresh token."""
        self.is_deleted = True
        self.refresh_token = None
        self.mark_updated()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the public parts of the user."""
        return {
            'id': str(self.id),
            'username': self.username,
            'roles': self.role_names,
            'last_login_at': self.last_login_at.isoformat() if self.last_login_at else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    @classmethod
    def register(
        cls,
        username: str,
        hashed: HashedPassword,
        scheme: str,
        roles: Optional[List[Role]] = None
    ) -> 'User':
        """
        Factory method to create a new user.

        Args:
            username: Unique sign-in name
            hashed: Derived credential
            scheme: Scheme tag the credential was derived with
            roles: Initial roles (none by default)

        Returns:
            New User instance with a UserRegistered event
        """
        user = cls(
            username=username.strip(),
            password_hash=hashed.digest,
            salt=hashed.salt,
            password_scheme=scheme,
            roles=list(roles or []),
        )
        user.add_domain_event(UserRegistered(
            user_id=user.id,
            username=user.username
        ))
        return user
