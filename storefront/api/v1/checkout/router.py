"""Checkout endpoint"""

from fastapi import APIRouter, Depends, Header, Response, status
from typing import Optional

from storefront.api.v1.auth.dependencies import get_current_user_optional
from storefront.api.v1.orders.schemas import OrderResponse
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import CheckoutRequest
from .services import CheckoutService

router = APIRouter()

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    response: Response,
    data: Optional[CheckoutRequest] = None,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key", max_length=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """
    Place an order from the caller's cart

    A repeated Idempotency-Key returns the original order with 200.
    """
    service = CheckoutService(storage)
    result = await service.checkout(
        user_id=current_user.id if current_user else None,
        shipping_address=data.shipping_address if data else None,
        checkout_token=idempotency_key,
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result.order
