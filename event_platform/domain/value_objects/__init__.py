# Value Objects
from .hashed_password import HashedPassword

__all__ = [
    'HashedPassword',
]
