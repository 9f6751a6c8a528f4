"""Category schemas"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import re
import uuid

from .base import BaseSchema

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

def validate_slug(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if not SLUG_PATTERN.match(v):
        raise ValueError("Slug may contain only lowercase letters, digits and single hyphens")
    return v

class CategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=120)
    parent_id: Optional[uuid.UUID] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v):
        return validate_slug(v)

class CategoryUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=120)
    parent_id: Optional[uuid.UUID] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v):
        return validate_slug(v)

class CategoryResponse(BaseSchema):
    id: uuid.UUID
    name: str
    slug: str
    parent_id: Optional[uuid.UUID] = None
    created_at: datetime
