"""
Authentication schemas for request/response validation
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from storefront.core.config import settings
from storefront.models import UserRole
from storefront.schemas.base import BaseSchema

def validate_password_length(v: str) -> str:
    if len(v) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
    return v

class RegisterRequest(BaseSchema):
    """Self-service account creation"""
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., max_length=128)
    email: Optional[str] = Field(None, max_length=255)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_password_length(v)

class LoginRequest(BaseSchema):
    username: str
    password: str

class UserResponse(BaseSchema):
    id: uuid.UUID
    username: str
    email: Optional[str] = None
    role: UserRole
    created_at: datetime

class TokenResponse(BaseSchema):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AuthResponse(TokenResponse):
    user: UserResponse
