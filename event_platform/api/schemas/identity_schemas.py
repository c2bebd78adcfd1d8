"""
Pydantic schemas for identity endpoints.
"""
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class RegisterRequest(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=3, max_length=100, description="Unique sign-in name")
    password: str = Field(..., min_length=6, description="Password (min 6 chars)")
    confirm_password: str = Field(..., description="Must match password")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        cleaned = v.strip()
        if len(cleaned) < 3:
            raise ValueError('Username must be at least 3 characters')
        return cleaned

    @model_validator(mode='after')
    def passwords_match(self) -> 'RegisterRequest':
        if self.password != self.confirm_password:
            raise ValueError('Passwords do not match')
        return self


class AuthenticateRequest(BaseModel):
    """Sign-in request."""

    username: str = Field(..., min_length=1, max_length=100, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class RefreshTokenRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token issued at sign-in")


class RegisterResponse(BaseModel):
    """Created user."""

    user_id: UUID
    username: str


class AuthenticateResponse(BaseModel):
    """Successful sign-in."""

    user_id: UUID
    username: str
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")
    roles: List[str] = Field(default_factory=list)
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiry in seconds")


class RefreshTokenResponse(BaseModel):
    """New token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int


class CurrentUserResponse(BaseModel):
    """Identity carried by the presented access token."""

    user_id: UUID
    username: str
    roles: List[str]


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    message: Optional[str] = None
    details: Optional[dict] = None
