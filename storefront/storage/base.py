"""
Storage contracts
Shared by the SQL and in-memory backends
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, Tuple
import uuid

from storefront.models import (
    CartItem, Category, Order, OrderItem, OrderStatus, Product, Review, User, WishlistItem
)

class StorageError(Exception):
    """Backend could not complete an operation"""

@dataclass
class CartLine:
    """Cart line joined with its product (None once the product is deleted)"""
    item: CartItem
    product: Optional[Product]

    @property
    def id(self) -> uuid.UUID:
        return self.item.id

    @property
    def product_id(self) -> uuid.UUID:
        return self.item.product_id

    @property
    def quantity(self) -> int:
        return self.item.quantity

    @property
    def session_id(self) -> str:
        return self.item.session_id

    @property
    def unit_price(self) -> Decimal:
        if self.product is None or self.product.price is None:
            return Decimal("0")
        return Decimal(self.product.price)

@dataclass
class ReviewWithUser:
    review: Review
    username: str

@dataclass
class WishlistEntry:
    item: WishlistItem
    product: Product

class UserStore(Protocol):
    async def get(self, user_id: uuid.UUID) -> Optional[User]: ...
    async def get_by_username(self, username: str) -> Optional[User]: ...
    async def list(self) -> List[User]: ...
    async def create(self, data: Dict[str, Any]) -> User: ...
    async def update(self, user_id: uuid.UUID, data: Dict[str, Any]) -> Optional[User]: ...
    async def delete(self, user_id: uuid.UUID) -> bool: ...

class ProductStore(Protocol):
    async def list(
        self, category: Optional[str] = None, subcategory: Optional[str] = None
    ) -> List[Product]: ...
    async def get(self, product_id: uuid.UUID) -> Optional[Product]: ...
    async def create(self, data: Dict[str, Any]) -> Product: ...
    async def update(self, product_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Product]: ...
    async def delete(self, product_id: uuid.UUID) -> bool: ...

    async def decrement_inventory(self, product_id: uuid.UUID, quantity: int) -> Optional[Product]:
        """
        Atomic inventory = max(0, inventory - quantity), with in_stock = inventory > 0
        Untracked (NULL) inventory is left alone; None for an unknown product
        """
        ...

class CategoryStore(Protocol):
    async def list(self) -> List[Category]: ...
    async def get(self, category_id: uuid.UUID) -> Optional[Category]: ...
    async def get_by_slug(self, slug: str) -> Optional[Category]: ...
    async def create(self, data: Dict[str, Any]) -> Category: ...
    async def update(self, category_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Category]: ...
    async def delete(self, category_id: uuid.UUID) -> bool: ...

class CartStore(Protocol):
    async def list_lines(self, session_id: str) -> List[CartLine]: ...
    async def get(self, line_id: uuid.UUID) -> Optional[CartItem]: ...

    async def add(self, session_id: str, product_id: uuid.UUID, quantity: int) -> CartItem:
        """Create a line or increment the session's existing one"""
        ...

    async def update_quantity(self, line_id: uuid.UUID, quantity: int) -> Optional[CartItem]:
        """Set quantity; non-positive removes the line"""
        ...

    async def remove(self, line_id: uuid.UUID) -> bool: ...
    async def clear(self, session_id: str) -> int: ...
    async def remove_product(self, product_id: uuid.UUID) -> int: ...

class OrderStore(Protocol):
    async def create(self, data: Dict[str, Any]) -> Order: ...
    async def get(self, order_id: uuid.UUID) -> Optional[Order]: ...
    async def list(self) -> List[Order]: ...
    async def list_for_user(self, user_id: uuid.UUID) -> List[Order]: ...
    async def get_by_checkout_token(self, user_id: uuid.UUID, token: str) -> Optional[Order]: ...
    async def update_status(self, order_id: uuid.UUID, status: OrderStatus) -> Optional[Order]: ...
    async def count_for_user(self, user_id: uuid.UUID) -> int: ...

class OrderItemStore(Protocol):
    async def create(self, data: Dict[str, Any]) -> OrderItem: ...
    async def list_for_order(self, order_id: uuid.UUID) -> List[OrderItem]: ...
    async def has_purchased(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool: ...
    async def exists_for_product(self, product_id: uuid.UUID) -> bool: ...

class ReviewStore(Protocol):
    async def list_for_product(self, product_id: uuid.UUID) -> List[ReviewWithUser]: ...
    async def list_for_user(self, user_id: uuid.UUID) -> List[Review]: ...
    async def get(self, review_id: uuid.UUID) -> Optional[Review]: ...
    async def create(self, data: Dict[str, Any]) -> Review: ...
    async def set_helpful(self, review_id: uuid.UUID, helpful: int) -> Optional[Review]: ...
    async def delete_for_product(self, product_id: uuid.UUID) -> int: ...
    async def delete_for_user(self, user_id: uuid.UUID) -> int: ...

class WishlistStore(Protocol):
    async def list_for_user(self, user_id: uuid.UUID) -> List[WishlistEntry]: ...

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Tuple[WishlistItem, bool]:
        """Returns the entry and whether it was newly created"""
        ...

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool: ...
    async def remove_product(self, product_id: uuid.UUID) -> int: ...
    async def clear_user(self, user_id: uuid.UUID) -> int: ...

class Storage(Protocol):
    """
    One unit of work over every store
    Writes inside transaction() are kept together or discarded together
    """

    users: UserStore
    products: ProductStore
    categories: CategoryStore
    carts: CartStore
    orders: OrderStore
    order_items: OrderItemStore
    reviews: ReviewStore
    wishlist: WishlistStore

    def transaction(self) -> AsyncContextManager["Storage"]: ...

class StorageProvider(Protocol):
    """Hands out a Storage for one request"""

    def session(self) -> AsyncContextManager[Storage]: ...
