"""
Review endpoints
Mounted without a prefix because they hang off products, users and reviews
"""

from fastapi import APIRouter, Depends, status
from typing import List, Optional
import uuid

from storefront.api.v1.auth.dependencies import get_current_user
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import ProductReviewResponse, ReviewCreate, ReviewHelpfulUpdate, ReviewResponse
from .services import ReviewService

router = APIRouter()

@router.get("/products/{product_id}/reviews", response_model=List[ProductReviewResponse])
async def list_product_reviews(product_id: uuid.UUID, storage: Storage = Depends(get_storage)):
    service = ReviewService(storage)
    return await service.list_product_reviews(product_id)

@router.post(
    "/products/{product_id}/reviews",
    response_model=ProductReviewResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_review(
    product_id: uuid.UUID,
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    service = ReviewService(storage)
    return await service.create_review(product_id, data, current_user)

@router.get("/users/{user_id}/reviews", response_model=List[ReviewResponse])
async def list_user_reviews(user_id: uuid.UUID, storage: Storage = Depends(get_storage)):
    service = ReviewService(storage)
    return await service.list_user_reviews(user_id)

@router.patch("/reviews/{review_id}/helpful", response_model=ReviewResponse)
async def mark_review_helpful(
    review_id: uuid.UUID,
    data: Optional[ReviewHelpfulUpdate] = None,
    storage: Storage = Depends(get_storage)
):
    """Set the helpful count, or add one when no count is sent"""
    service = ReviewService(storage)
    return await service.mark_helpful(review_id, data.helpful if data else None)
