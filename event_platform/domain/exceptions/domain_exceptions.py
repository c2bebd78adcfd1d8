"""
Domain Exceptions - Custom exceptions for domain-specific errors.
"""
from typing import Any, Dict, Optional


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    All domain exceptions should inherit from this class to allow
    for consistent error handling across the application.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Can contain multiple validation errors for different fields.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, list]] = None
    ):
        self.errors = errors or {}
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            details={'validation_errors': self.errors}
        )


class AuthenticationException(DomainException):
    """Raised when credentials or a refresh token cannot be accepted."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message=message, code='NOT_AUTHENTICATED')


class DuplicateEntityException(DomainException):
    """Raised when attempting to create an entity that already exists."""

    def __init__(
        self,
        entity_type: str,
        field: str,
        value: Any
    ):
        super().__init__(
            message=f"{entity_type} with {field}='{value}' already exists",
            code='DUPLICATE_ENTITY',
            details={
                'entity_type': entity_type,
                'field': field,
                'value': str(value)
            }
        )


class InvalidArgumentException(DomainException, ValueError):
    """
    Raised when a credential primitive is handed input it cannot work with,
    such as a salt of the wrong type or length.
    """

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(
            message=message,
            code='INVALID_ARGUMENT',
            details={'argument': argument}
        )


class CryptoUnavailableException(DomainException):
    """Raised when the platform cannot supply secure random bytes."""

    def __init__(self, message: str = "Secure random number generator unavailable", original_error: Optional[str] = None):
        super().__init__(
            message=message,
            code='CRYPTO_UNAVAILABLE',
            details={'original_error': original_error}
        )


class EntityNotFoundException(DomainException):
    """Raised when a stored entity expected to exist is missing."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} '{entity_id}' not found",
            code='NOT_FOUND',
            details={
                'entity_type': entity_type,
                'entity_id': str(entity_id)
            }
        )
