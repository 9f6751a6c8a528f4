"""
In-memory storage backend
Keeps transient model instances in per-table dicts; used by tests and
by STORAGE_BACKEND=memory for throwaway demo runs
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple
import asyncio
import uuid

from storefront.models import (
    CartItem, Category, Order, OrderItem, OrderStatus, Product, Review, User, WishlistItem
)
from .base import CartLine, ReviewWithUser, WishlistEntry

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _instantiate(model, data: Dict[str, Any]):
    """Build a transient instance, applying the column defaults the database would"""
    values = dict(data)
    now = _now()
    for column in model.__table__.columns:
        if column.key in values:
            continue
        if column.primary_key:
            values[column.key] = uuid.uuid4()
        elif column.server_default is not None:
            values[column.key] = now
        elif column.default is not None and column.default.is_scalar:
            values[column.key] = column.default.arg
        else:
            values[column.key] = None
    if "price" in values and values["price"] is not None:
        values["price"] = Decimal(str(values["price"]))
    if "total" in values and values["total"] is not None:
        values["total"] = Decimal(str(values["total"]))
    return model(**values)

class _MemoryStore:
    table = ""
    model = None

    def __init__(self, storage: "MemoryStorage"):
        self.storage = storage

    @property
    def rows(self) -> Dict[uuid.UUID, Any]:
        return self.storage.tables[self.table]

    def _where(self, **criteria) -> List[Any]:
        return [
            row for row in self.rows.values()
            if all(getattr(row, field) == value for field, value in criteria.items())
        ]

    async def _get(self, key):
        return self.rows.get(key)

    async def _create(self, data: Dict[str, Any]):
        instance = _instantiate(self.model, data)
        self.storage.put(self.table, instance)
        return instance

    async def _update(self, key, data: Dict[str, Any]):
        instance = self.rows.get(key)
        if instance is None:
            return None
        self.storage.assign(instance, data)
        return instance

    async def _delete(self, key) -> bool:
        if key not in self.rows:
            return False
        self.storage.remove(self.table, key)
        return True

    def _delete_where(self, **criteria) -> int:
        matches = self._where(**criteria)
        for row in matches:
            self.storage.remove(self.table, row.id)
        return len(matches)

class MemoryUserStore(_MemoryStore):
    table = "users"
    model = User

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        matches = self._where(username=username)
        return matches[0] if matches else None

    async def list(self) -> List[User]:
        return list(self.rows.values())

    async def create(self, data: Dict[str, Any]) -> User:
        return await self._create(data)

    async def update(self, user_id: uuid.UUID, data: Dict[str, Any]) -> Optional[User]:
        return await self._update(user_id, data)

    async def delete(self, user_id: uuid.UUID) -> bool:
        return await self._delete(user_id)

class MemoryProductStore(_MemoryStore):
    table = "products"
    model = Product

    async def list(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None
    ) -> List[Product]:
        if subcategory:
            return self._where(subcategory=subcategory)
        if category:
            return self._where(category=category)
        return list(self.rows.values())

    async def get(self, product_id: uuid.UUID) -> Optional[Product]:
        return await self._get(product_id)

    async def create(self, data: Dict[str, Any]) -> Product:
        return await self._create(data)

    async def update(self, product_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Product]:
        return await self._update(product_id, data)

    async def delete(self, product_id: uuid.UUID) -> bool:
        return await self._delete(product_id)

    async def decrement_inventory(self, product_id: uuid.UUID, quantity: int) -> Optional[Product]:
        # No await between read and write, so concurrent tasks cannot interleave here
        product = self.rows.get(product_id)
        if product is None or product.inventory is None:
            return product
        remaining = max(0, product.inventory - quantity)
        self.storage.assign(product, {"inventory": remaining, "in_stock": remaining > 0})
        return product

class MemoryCategoryStore(_MemoryStore):
    table = "categories"
    model = Category

    async def list(self) -> List[Category]:
        return list(self.rows.values())

    async def get(self, category_id: uuid.UUID) -> Optional[Category]:
        return await self._get(category_id)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        matches = self._where(slug=slug)
        return matches[0] if matches else None

    async def create(self, data: Dict[str, Any]) -> Category:
        return await self._create(data)

    async def update(self, category_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Category]:
        return await self._update(category_id, data)

    async def delete(self, category_id: uuid.UUID) -> bool:
        for child in self._where(parent_id=category_id):
            self.storage.assign(child, {"parent_id": None})
        return await self._delete(category_id)

class MemoryCartStore(_MemoryStore):
    table = "cart_items"
    model = CartItem

    async def list_lines(self, session_id: str) -> List[CartLine]:
        products = self.storage.tables["products"]
        return [
            CartLine(item=item, product=products.get(item.product_id))
            for item in self._where(session_id=session_id)
        ]

    async def get(self, line_id: uuid.UUID) -> Optional[CartItem]:
        return await self._get(line_id)

    async def add(self, session_id: str, product_id: uuid.UUID, quantity: int) -> CartItem:
        matches = self._where(session_id=session_id, product_id=product_id)
        if matches:
            existing = matches[0]
            self.storage.assign(existing, {"quantity": existing.quantity + quantity})
            return existing
        return await self._create({
            "session_id": session_id,
            "product_id": product_id,
            "quantity": quantity,
        })

    async def update_quantity(self, line_id: uuid.UUID, quantity: int) -> Optional[CartItem]:
        if quantity <= 0:
            await self._delete(line_id)
            return None
        return await self._update(line_id, {"quantity": quantity})

    async def remove(self, line_id: uuid.UUID) -> bool:
        return await self._delete(line_id)

    async def clear(self, session_id: str) -> int:
        return self._delete_where(session_id=session_id)

    async def remove_product(self, product_id: uuid.UUID) -> int:
        return self._delete_where(product_id=product_id)

class MemoryOrderStore(_MemoryStore):
    table = "orders"
    model = Order

    async def create(self, data: Dict[str, Any]) -> Order:
        return await self._create(data)

    async def get(self, order_id: uuid.UUID) -> Optional[Order]:
        return await self._get(order_id)

    async def list(self) -> List[Order]:
        return list(reversed(self.rows.values()))

    async def list_for_user(self, user_id: uuid.UUID) -> List[Order]:
        return list(reversed(self._where(user_id=user_id)))

    async def get_by_checkout_token(self, user_id: uuid.UUID, token: str) -> Optional[Order]:
        matches = self._where(user_id=user_id, checkout_token=token)
        return matches[0] if matches else None

    async def update_status(self, order_id: uuid.UUID, status: OrderStatus) -> Optional[Order]:
        return await self._update(order_id, {"status": status})

    async def count_for_user(self, user_id: uuid.UUID) -> int:
        return len(self._where(user_id=user_id))

class MemoryOrderItemStore(_MemoryStore):
    table = "order_items"
    model = OrderItem

    async def create(self, data: Dict[str, Any]) -> OrderItem:
        return await self._create(data)

    async def list_for_order(self, order_id: uuid.UUID) -> List[OrderItem]:
        return self._where(order_id=order_id)

    async def has_purchased(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        orders = self.storage.tables["orders"]
        return any(
            orders[item.order_id].user_id == user_id
            for item in self._where(product_id=product_id)
            if item.order_id in orders
        )

    async def exists_for_product(self, product_id: uuid.UUID) -> bool:
        return bool(self._where(product_id=product_id))

class MemoryReviewStore(_MemoryStore):
    table = "product_reviews"
    model = Review

    async def list_for_product(self, product_id: uuid.UUID) -> List[ReviewWithUser]:
        users = self.storage.tables["users"]
        entries = []
        for review in reversed(self._where(product_id=product_id)):
            user = users.get(review.user_id)
            entries.append(ReviewWithUser(
                review=review,
                username=user.username if user else "Unknown User"
            ))
        return entries

    async def list_for_user(self, user_id: uuid.UUID) -> List[Review]:
        return list(reversed(self._where(user_id=user_id)))

    async def get(self, review_id: uuid.UUID) -> Optional[Review]:
        return await self._get(review_id)

    async def create(self, data: Dict[str, Any]) -> Review:
        return await self._create(data)

    async def set_helpful(self, review_id: uuid.UUID, helpful: int) -> Optional[Review]:
        return await self._update(review_id, {"helpful": helpful})

    async def delete_for_product(self, product_id: uuid.UUID) -> int:
        return self._delete_where(product_id=product_id)

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        return self._delete_where(user_id=user_id)

class MemoryWishlistStore(_MemoryStore):
    table = "wishlist_items"
    model = WishlistItem

    async def list_for_user(self, user_id: uuid.UUID) -> List[WishlistEntry]:
        products = self.storage.tables["products"]
        return [
            WishlistEntry(item=item, product=products[item.product_id])
            for item in reversed(self._where(user_id=user_id))
            if item.product_id in products
        ]

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Tuple[WishlistItem, bool]:
        matches = self._where(user_id=user_id, product_id=product_id)
        if matches:
            return matches[0], False
        item = await self._create({"user_id": user_id, "product_id": product_id})
        return item, True

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        return self._delete_where(user_id=user_id, product_id=product_id) > 0

    async def remove_product(self, product_id: uuid.UUID) -> int:
        return self._delete_where(product_id=product_id)

    async def clear_user(self, user_id: uuid.UUID) -> int:
        return self._delete_where(user_id=user_id)

class MemoryStorage:
    """Process-local storage with undo-journal transactions"""

    TABLES = (
        "users", "products", "categories", "cart_items",
        "orders", "order_items", "product_reviews", "wishlist_items",
    )

    def __init__(self):
        self.tables: Dict[str, Dict[uuid.UUID, Any]] = {name: {} for name in self.TABLES}
        self._journal: Optional[List[Callable[[], None]]] = None
        self._lock = asyncio.Lock()

        self.users = MemoryUserStore(self)
        self.products = MemoryProductStore(self)
        self.categories = MemoryCategoryStore(self)
        self.carts = MemoryCartStore(self)
        self.orders = MemoryOrderStore(self)
        self.order_items = MemoryOrderItemStore(self)
        self.reviews = MemoryReviewStore(self)
        self.wishlist = MemoryWishlistStore(self)

    def _record(self, undo: Callable[[], None]) -> None:
        if self._journal is not None:
            self._journal.append(undo)

    def put(self, table: str, instance) -> None:
        rows = self.tables[table]
        rows[instance.id] = instance
        self._record(lambda: rows.pop(instance.id, None))

    def remove(self, table: str, key) -> None:
        rows = self.tables[table]
        instance = rows.pop(key)
        self._record(lambda: rows.__setitem__(key, instance))

    def assign(self, instance, values: Dict[str, Any]) -> None:
        values = dict(values)
        if hasattr(instance, "updated_at"):
            values.setdefault("updated_at", _now())
        previous = {field: getattr(instance, field) for field in values}

        def undo():
            for field, value in previous.items():
                setattr(instance, field, value)

        for field, value in values.items():
            setattr(instance, field, value)
        self._record(undo)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator["MemoryStorage", None]:
        """Apply the block's writes together; replay the undo journal on error"""
        async with self._lock:
            self._journal = []
            try:
                yield self
            except Exception:
                for undo in reversed(self._journal):
                    undo()
                raise
            finally:
                self._journal = None

class MemoryStorageProvider:
    """Hands every request the same process-wide MemoryStorage"""

    def __init__(self, storage: Optional[MemoryStorage] = None):
        self.storage = storage or MemoryStorage()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[MemoryStorage, None]:
        yield self.storage
