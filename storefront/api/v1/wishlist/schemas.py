"""Wishlist schemas"""

from datetime import datetime
import uuid

from storefront.api.v1.products.schemas import ProductResponse
from storefront.schemas.base import BaseSchema

class WishlistAdd(BaseSchema):
    product_id: uuid.UUID

class WishlistItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    created_at: datetime
    product: ProductResponse
