"""
Review schemas
"""

from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid

from storefront.schemas.base import BaseSchema

class ReviewCreate(BaseSchema):
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=255)
    comment: Optional[str] = Field(None, max_length=5000)

class ReviewHelpfulUpdate(BaseSchema):
    """Explicit helpful count; omitted means +1"""
    helpful: Optional[int] = Field(None, ge=0)

class ReviewResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    verified: bool
    helpful: int
    created_at: datetime

class ProductReviewResponse(ReviewResponse):
    """Review with the reviewer's username"""
    username: str
