"""
Authentication schemas.

These schemas define the API contracts for account registration,
login and the access token handed back to clients.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Enforced here, at the request boundary. The credential store trusts its input.
PASSWORD_MIN_LENGTH = 6


class _Credentials(BaseModel):
    email: EmailStr = Field(description="Account email (case-insensitive)")
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(_Credentials):
    """Account registration request schema."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "a@x.com", "password": "secret1"}}
    )


class LoginRequest(BaseModel):
    """Login request schema.

    Deliberately loose: a malformed email or short password is just another
    failed login, not a validation error that hints at what was wrong.
    """

    email: str = Field(max_length=320, description="Account email")
    password: str = Field(max_length=128, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "a@x.com", "password": "secret1"}}
    )


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token lifetime in seconds")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 3600,
            }
        }
    )


class AccountResponse(BaseModel):
    """Account information response schema."""

    id: uuid.UUID = Field(description="Account unique identifier")
    email: str = Field(description="Account email")
    created_at: datetime = Field(description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)
