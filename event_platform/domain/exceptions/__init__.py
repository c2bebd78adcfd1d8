# Domain Exceptions
from .domain_exceptions import (
    DomainException,
    ValidationException,
    AuthenticationException,
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidArgumentException,
    CryptoUnavailableException,
)

__all__ = [
    'DomainException',
    'ValidationException',
    'AuthenticationException',
    'DuplicateEntityException',
    'EntityNotFoundException',
    'InvalidArgumentException',
    'CryptoUnavailableException',
]
