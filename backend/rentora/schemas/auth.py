"""Pydantic v2 request/response schemas for authentication and user endpoints."""

import uuid
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    """Schema for user registration. Self-service sign-up may choose USER or HOST."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    role: str = Field("USER", pattern="^(USER|HOST)$")


class LoginRequest(CamelModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    """Schema for token refresh."""

    refresh_token: str


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    avatar_url: str | None = Field(None, max_length=512)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Name cannot be null")
        return value


class ChangePasswordRequest(CamelModel):
    """Current password plus a new one with at least one lower-case letter, upper-case letter and digit."""

    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not (
            any(c.islower() for c in value) and any(c.isupper() for c in value) and any(c.isdigit() for c in value)
        ):
            raise ValueError("Password must contain a lower-case letter, an upper-case letter and a digit")
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TokenResponse(CamelModel):
    """JWT token pair returned on successful authentication."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(CamelModel):
    """Public user profile information."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    avatar_url: str | None = None
    role: str
    is_active: bool
    created_at: datetime


class UserSummary(CamelModel):
    """Minimal user card embedded in other resources."""

    id: uuid.UUID
    first_name: str
    last_name: str
    avatar_url: str | None = None


class AuthResponse(CamelModel):
    """Combined user + tokens returned on register/login."""

    user: UserResponse
    tokens: TokenResponse
