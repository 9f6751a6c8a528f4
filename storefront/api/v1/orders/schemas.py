"""
Order schemas for request/response validation
"""

from pydantic import Field
from datetime import datetime
from decimal import Decimal
import uuid

from storefront.models import OrderStatus
from storefront.schemas.base import BaseSchema

class OrderResponse(BaseSchema):
    id: uuid.UUID
    user_id: uuid.UUID
    status: OrderStatus
    total: Decimal
    shipping_address: str
    created_at: datetime
    updated_at: datetime

class OrderItemResponse(BaseSchema):
    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: Decimal

class OrderStatusUpdate(BaseSchema):
    """Validated by the service so an unknown value maps to 400"""
    status: str = Field(..., min_length=1, max_length=20)
