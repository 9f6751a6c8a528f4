"""
Product review service
"""

from typing import Any, Dict, List, Optional
import logging
import uuid

from storefront.core.exceptions import NotFoundException
from storefront.models import Review, User
from storefront.storage import Storage
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)

class ReviewService:
    """Product reviews and ratings"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_product_reviews(self, product_id: uuid.UUID) -> List[Dict[str, Any]]:
        entries = await self.storage.reviews.list_for_product(product_id)
        return [
            {**ReviewService._review_fields(entry.review), "username": entry.username}
            for entry in entries
        ]

    @staticmethod
    def _review_fields(review: Review) -> Dict[str, Any]:
        return {
            "id": review.id,
            "product_id": review.product_id,
            "user_id": review.user_id,
            "rating": review.rating,
            "title": review.title,
            "comment": review.comment,
            "verified": review.verified,
            "helpful": review.helpful,
            "created_at": review.created_at,
        }

    async def create_review(self, product_id: uuid.UUID, data: ReviewCreate, user: User) -> Dict[str, Any]:
        """Create a review; marked verified when the reviewer has ordered the product"""
        if await self.storage.products.get(product_id) is None:
            raise NotFoundException("Product not found")

        verified = await self.storage.order_items.has_purchased(user.id, product_id)

        async with self.storage.transaction():
            review = await self.storage.reviews.create({
                "product_id": product_id,
                "user_id": user.id,
                "rating": data.rating,
                "title": data.title,
                "comment": data.comment,
                "verified": verified,
            })

        logger.info(f"User {user.id} reviewed product {product_id} ({data.rating}/5, verified={verified})")
        return {**self._review_fields(review), "username": user.username}

    async def list_user_reviews(self, user_id: uuid.UUID) -> List[Review]:
        return await self.storage.reviews.list_for_user(user_id)

    async def mark_helpful(self, review_id: uuid.UUID, helpful: Optional[int] = None) -> Review:
        review = await self.storage.reviews.get(review_id)
        if review is None:
            raise NotFoundException("Review not found")

        count = helpful if helpful is not None else review.helpful + 1
        async with self.storage.transaction():
            return await self.storage.reviews.set_helpful(review_id, count)
