"""
Configuration management for the Event Management Platform API.

Uses Pydantic settings for validation and environment variable support.
"""
import hashlib
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_prefix='DB_',
        env_file='.env',
        extra='ignore'
    )

    host: str = Field(default='localhost', description='Database host')
    port: int = Field(default=5432, description='Database port')
    name: str = Field(default='event_management_platform', description='Database name')
    user: str = Field(default='postgres', description='Database user')
    password: str = Field(default='postgres', description='Database password')
    pool_size: int = Field(default=5, description='Connection pool size')
    max_overflow: int = Field(default=10, description='Max overflow connections')
    echo_sql: bool = Field(default=False, description='Echo SQL queries')

    @property
    def url(self) -> str:
        """Build database URL."""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(
        env_prefix='JWT_',
        env_file='.env',
        extra='ignore'
    )

    secret_key: str = Field(
        default='DefaultSecretKeyForDevelopment123!',
        description='Secret key for JWT signing'
    )
    algorithm: str = Field(default='HS256', description='JWT algorithm')
    access_token_expire_minutes: int = Field(
        default=60,
        description='Access token expiration in minutes'
    )
    issuer: Optional[str] = Field(
        default='EventManagementPlatform',
        description='JWT token issuer'
    )
    audience: Optional[str] = Field(
        default='EventManagementPlatform',
        description='JWT token audience'
    )


class PasswordHashingSettings(BaseSettings):
    """
    Credential derivation parameters.

    Changing ``prf`` or ``iterations`` does not invalidate stored credentials:
    every credential records the scheme it was derived with, and outdated
    credentials are re-derived on the next successful login.
    """

    model_config = SettingsConfigDict(
        env_prefix='PASSWORD_HASH_',
        env_file='.env',
        extra='ignore'
    )

    prf: str = Field(default='sha256', description='HMAC digest used as the PBKDF2 PRF')
    iterations: int = Field(default=10000, description='PBKDF2 iteration count')

    @field_validator('prf')
    @classmethod
    def validate_prf(cls, v: str) -> str:
        """Only accept digests hashlib can run through HMAC."""
        name = v.strip().lower()
        if name not in hashlib.algorithms_guaranteed or name.startswith('shake_'):
            raise ValueError(f"Unsupported PBKDF2 PRF: {v}")
        return name

    @field_validator('iterations')
    @classmethod
    def validate_iterations(cls, v: int) -> int:
        if v < 1:
            raise ValueError('Value must be a positive integer')
        return v


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(
        env_prefix='CORS_',
        env_file='.env',
        extra='ignore'
    )

    allowed_origins: List[str] = Field(
        default=['http://localhost:4200'],
        description='Allowed origins for CORS'
    )
    allow_credentials: bool = Field(default=True)
    allowed_methods: List[str] = Field(default=['*'])
    allowed_headers: List[str] = Field(default=['*'])


class SeedSettings(BaseSettings):
    """Development data seeded at startup."""

    model_config = SettingsConfigDict(
        env_prefix='SEED_',
        env_file='.env',
        extra='ignore'
    )

    enabled: bool = Field(default=True, description='Seed development data when environment is development')
    admin_username: str = Field(default='Admin', description='Username of the seeded administrator')
    admin_password: str = Field(default='P@ssw0rd', description='Password of the seeded administrator')


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Application
    app_name: str = Field(default='Event Management Platform')
    app_version: str = Field(default='1.0.0')
    debug: bool = Field(default=False)
    environment: str = Field(default='development')  # development, staging, production

    # Server
    host: str = Field(default='0.0.0.0')
    port: int = Field(default=8000)
    workers: int = Field(default=1)
    reload: bool = Field(default=False)

    # API
    api_prefix: str = Field(default='/api')

    # Logging
    log_level: str = Field(default='INFO')
    log_format: str = Field(default='json')  # json or text

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    password_hashing: PasswordHashingSettings = Field(default_factory=PasswordHashingSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ('json', 'text'):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == 'production'

    @property
    def seeds_development_data(self) -> bool:
        """Check if the development seed should run at startup."""
        return self.environment == 'development' and self.seed.enabled


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return AppSettings()
