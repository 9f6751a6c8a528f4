"""
Wishlist endpoints
"""

from fastapi import APIRouter, Depends, Response, status
from typing import List
import logging
import uuid

from storefront.api.v1.auth.dependencies import get_current_user
from storefront.core.exceptions import NotFoundException
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import WishlistAdd, WishlistItemResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[WishlistItemResponse])
async def get_wishlist(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    entries = await storage.wishlist.list_for_user(current_user.id)
    return [
        {
            "id": entry.item.id,
            "product_id": entry.item.product_id,
            "created_at": entry.item.created_at,
            "product": entry.product,
        }
        for entry in entries
    ]

@router.post("", response_model=WishlistItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    data: WishlistAdd,
    response: Response,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    """Save a product; adding it again returns the existing entry with 200"""
    product = await storage.products.get(data.product_id)
    if product is None:
        raise NotFoundException("Product not found")

    async with storage.transaction():
        item, created = await storage.wishlist.add(current_user.id, data.product_id)

    if not created:
        response.status_code = status.HTTP_200_OK
    else:
        logger.info(f"User {current_user.id} saved product {data.product_id}")

    return {
        "id": item.id,
        "product_id": item.product_id,
        "created_at": item.created_at,
        "product": product,
    }

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_wishlist(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    async with storage.transaction():
        removed = await storage.wishlist.remove(current_user.id, product_id)
    if not removed:
        raise NotFoundException("Wishlist item not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
