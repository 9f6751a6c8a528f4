"""
Cart schemas for request/response validation
"""

from pydantic import Field
from typing import List
from datetime import datetime
from decimal import Decimal
import uuid

from storefront.api.v1.products.schemas import ProductResponse
from storefront.schemas.base import BaseSchema

class CartItemCreate(BaseSchema):
    """Schema for adding item to cart"""
    product_id: uuid.UUID
    quantity: int = Field(1, gt=0)

class CartItemUpdate(BaseSchema):
    """Schema for updating cart item"""
    quantity: int = Field(..., gt=0)

class CartItemResponse(BaseSchema):
    """Cart line joined with its product"""
    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    created_at: datetime
    product: ProductResponse
    line_total: Decimal

class CartResponse(BaseSchema):
    """Schema for complete cart response"""
    items: List[CartItemResponse]
    total_items: int
    subtotal: Decimal

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": [],
                "totalItems": 0,
                "subtotal": "0.00"
            }
        }
    }
