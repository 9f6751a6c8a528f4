"""
User administration schemas
"""

from pydantic import Field, field_validator
from typing import Optional

from storefront.api.v1.auth.schemas import validate_password_length
from storefront.models import UserRole
from storefront.schemas.base import BaseSchema

class UserCreate(BaseSchema):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., max_length=128)
    email: Optional[str] = Field(None, max_length=255)
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_password_length(v)

class UserUpdate(BaseSchema):
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, max_length=128)
    email: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if v is None:
            return v
        return validate_password_length(v)
