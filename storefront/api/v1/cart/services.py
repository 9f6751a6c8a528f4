"""
Cart service layer
Handles shopping cart business logic
"""

from typing import Any, Dict, List, Optional
from decimal import Decimal
import logging
import uuid

from storefront.core.exceptions import NotFoundException
from storefront.models import CartItem
from storefront.storage import CartLine, Storage

logger = logging.getLogger(__name__)

def cart_session_key(user_id: uuid.UUID) -> str:
    """Cart session key for an authenticated user"""
    return f"user-{user_id}"

class CartService:
    """Shopping cart service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    @staticmethod
    def _line_to_response(line: CartLine) -> Dict[str, Any]:
        return {
            "id": line.id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "created_at": line.item.created_at,
            "product": line.product,
            "line_total": line.unit_price * line.quantity,
        }

    async def get_cart(self, session_id: Optional[str]) -> Dict[str, Any]:
        """
        Get cart for a session

        Lines whose product has been deleted are left out of the
        response and the totals.
        """
        lines: List[CartLine] = []
        if session_id:
            lines = [
                line for line in await self.storage.carts.list_lines(session_id)
                if line.product is not None
            ]

        return {
            "items": [self._line_to_response(line) for line in lines],
            "total_items": sum(line.quantity for line in lines),
            "subtotal": sum((line.unit_price * line.quantity for line in lines), Decimal("0")),
        }

    async def add_to_cart(self, session_id: str, product_id: uuid.UUID, quantity: int) -> Dict[str, Any]:
        """Add a product, incrementing the line if it is already in the cart"""
        product = await self.storage.products.get(product_id)
        if product is None:
            raise NotFoundException("Product not found")

        async with self.storage.transaction():
            item = await self.storage.carts.add(session_id, product_id, quantity)

        logger.debug(f"Cart {session_id}: {product_id} x{quantity} (line now {item.quantity})")
        return self._line_to_response(CartLine(item=item, product=product))

    async def _get_own_line(self, session_id: Optional[str], line_id: uuid.UUID) -> CartItem:
        item = await self.storage.carts.get(line_id)
        if item is None or session_id is None or item.session_id != session_id:
            raise NotFoundException("Cart item not found")
        return item

    async def update_cart_item(self, session_id: Optional[str], line_id: uuid.UUID, quantity: int) -> Dict[str, Any]:
        await self._get_own_line(session_id, line_id)

        async with self.storage.transaction():
            item = await self.storage.carts.update_quantity(line_id, quantity)

        product = await self.storage.products.get(item.product_id)
        if product is None:
            raise NotFoundException("Product not found")
        return self._line_to_response(CartLine(item=item, product=product))

    async def remove_from_cart(self, session_id: Optional[str], line_id: uuid.UUID) -> None:
        await self._get_own_line(session_id, line_id)

        async with self.storage.transaction():
            await self.storage.carts.remove(line_id)

    async def clear_cart(self, session_id: Optional[str]) -> int:
        if not session_id:
            return 0
        async with self.storage.transaction():
            removed = await self.storage.carts.clear(session_id)
        logger.info(f"Cleared {removed} line(s) from cart {session_id}")
        return removed
