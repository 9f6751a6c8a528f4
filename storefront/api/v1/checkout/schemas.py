"""Checkout request schema"""

from typing import Optional

from storefront.schemas.base import BaseSchema

class CheckoutRequest(BaseSchema):
    # Optional here so a missing address reaches the service's 400
    shipping_address: Optional[str] = None
