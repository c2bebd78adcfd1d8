# Domain Events
from .user_events import (
    UserRegistered,
    UserAuthenticated,
    UserRefreshTokenRotated,
    UserCredentialsRehashed,
)

__all__ = [
    'UserRegistered',
    'UserAuthenticated',
    'UserRefreshTokenRotated',
    'UserCredentialsRehashed',
]
