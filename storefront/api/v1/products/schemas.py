"""
Product schemas for request/response validation
"""

from pydantic import Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

from storefront.schemas.base import BaseSchema

class ProductBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: str
    image_url: str = Field(..., max_length=500)
    category: str = Field(..., min_length=1, max_length=100)
    subcategory: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

class ProductCreate(ProductBase):
    """Admin product creation; a null inventory means stock is not tracked"""
    inventory: Optional[int] = Field(0, ge=0)
    in_stock: Optional[bool] = None

class ProductUpdate(BaseSchema):
    """Partial update; only the fields sent are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    inventory: Optional[int] = Field(None, ge=0)
    in_stock: Optional[bool] = None

class ProductResponse(BaseSchema):
    id: uuid.UUID
    name: str
    description: str
    image_url: str
    category: str
    subcategory: str
    price: Decimal
    in_stock: bool
    inventory: Optional[int] = None
    created_at: datetime
    updated_at: datetime
