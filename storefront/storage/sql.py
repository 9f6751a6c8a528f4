"""
SQLAlchemy storage backend
Every store shares the request's AsyncSession
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple
import uuid

from sqlalchemy import select, update, delete, func, case, exists
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db_context

from storefront.models import (
    CartItem, Category, Order, OrderItem, OrderStatus, Product, Review, User, WishlistItem
)
from .base import CartLine, ReviewWithUser, WishlistEntry

class _SQLStore:
    """Shared helpers for session-bound stores"""

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get(self, key):
        return await self.session.get(self.model, key)

    async def _create(self, data: Dict[str, Any]):
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def _update(self, key, data: Dict[str, Any]):
        instance = await self._get(key)
        if instance is None:
            return None
        for field, value in data.items():
            setattr(instance, field, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def _delete(self, key) -> bool:
        result = await self.session.execute(
            delete(self.model).where(self.model.id == key)
        )
        return result.rowcount > 0

class SQLUserStore(_SQLStore):
    model = User

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def create(self, data: Dict[str, Any]) -> User:
        return await self._create(data)

    async def update(self, user_id: uuid.UUID, data: Dict[str, Any]) -> Optional[User]:
        return await self._update(user_id, data)

    async def delete(self, user_id: uuid.UUID) -> bool:
        return await self._delete(user_id)

class SQLProductStore(_SQLStore):
    model = Product

    async def list(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None
    ) -> List[Product]:
        query = select(Product)
        if subcategory:
            query = query.where(Product.subcategory == subcategory)
        elif category:
            query = query.where(Product.category == category)
        result = await self.session.execute(query.order_by(Product.created_at, Product.name))
        return list(result.scalars().all())

    async def get(self, product_id: uuid.UUID) -> Optional[Product]:
        return await self._get(product_id)

    async def create(self, data: Dict[str, Any]) -> Product:
        return await self._create(data)

    async def update(self, product_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Product]:
        return await self._update(product_id, data)

    async def delete(self, product_id: uuid.UUID) -> bool:
        return await self._delete(product_id)

    async def decrement_inventory(self, product_id: uuid.UUID, quantity: int) -> Optional[Product]:
        # Single conditional UPDATE: every right-hand side reads the pre-update row
        await self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.inventory.is_not(None))
            .values(
                inventory=case(
                    (Product.inventory > quantity, Product.inventory - quantity),
                    else_=0
                ),
                in_stock=Product.inventory > quantity,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        return await self.session.get(Product, product_id, populate_existing=True)

class SQLCategoryStore(_SQLStore):
    model = Category

    async def list(self) -> List[Category]:
        result = await self.session.execute(select(Category).order_by(Category.created_at, Category.name))
        return list(result.scalars().all())

    async def get(self, category_id: uuid.UUID) -> Optional[Category]:
        return await self._get(category_id)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def create(self, data: Dict[str, Any]) -> Category:
        return await self._create(data)

    async def update(self, category_id: uuid.UUID, data: Dict[str, Any]) -> Optional[Category]:
        return await self._update(category_id, data)

    async def delete(self, category_id: uuid.UUID) -> bool:
        # Detach subcategories first so the self-reference does not block the delete
        await self.session.execute(
            update(Category)
            .where(Category.parent_id == category_id)
            .values(parent_id=None)
            .execution_options(synchronize_session=False)
        )
        return await self._delete(category_id)

class SQLCartStore(_SQLStore):
    model = CartItem

    async def list_lines(self, session_id: str) -> List[CartLine]:
        result = await self.session.execute(
            select(CartItem, Product)
            .outerjoin(Product, CartItem.product_id == Product.id)
            .where(CartItem.session_id == session_id)
            .order_by(CartItem.created_at)
        )
        return [CartLine(item=item, product=product) for item, product in result.all()]

    async def get(self, line_id: uuid.UUID) -> Optional[CartItem]:
        return await self._get(line_id)

    async def add(self, session_id: str, product_id: uuid.UUID, quantity: int) -> CartItem:
        result = await self.session.execute(
            select(CartItem).where(
                CartItem.session_id == session_id,
                CartItem.product_id == product_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            existing.quantity = existing.quantity + quantity
            await self.session.flush()
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
        result = await self.session.execute(
            delete(CartItem)
            .where(CartItem.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def remove_product(self, product_id: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(CartItem)
            .where(CartItem.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

class SQLOrderStore(_SQLStore):
    model = Order

    async def create(self, data: Dict[str, Any]) -> Order:
        return await self._create(data)

    async def get(self, order_id: uuid.UUID) -> Optional[Order]:
        return await self._get(order_id)

    async def list(self) -> List[Order]:
        result = await self.session.execute(select(Order).order_by(Order.created_at.desc()))
        return list(result.scalars().all())

    async def list_for_user(self, user_id: uuid.UUID) -> List[Order]:
        result = await self.session.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_checkout_token(self, user_id: uuid.UUID, token: str) -> Optional[Order]:
        result = await self.session.execute(
            select(Order).where(Order.user_id == user_id, Order.checkout_token == token)
        )
        return result.scalar_one_or_none()

    async def update_status(self, order_id: uuid.UUID, status: OrderStatus) -> Optional[Order]:
        return await self._update(order_id, {"status": status})

    async def count_for_user(self, user_id: uuid.UUID) -> int:
        return await self.session.scalar(
            select(func.count(Order.id)).where(Order.user_id == user_id)
        )

class SQLOrderItemStore(_SQLStore):
    model = OrderItem

    async def create(self, data: Dict[str, Any]) -> OrderItem:
        return await self._create(data)

    async def list_for_order(self, order_id: uuid.UUID) -> List[OrderItem]:
        result = await self.session.execute(
            select(OrderItem).where(OrderItem.order_id == order_id)
        )
        return list(result.scalars().all())

    async def has_purchased(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        return await self.session.scalar(
            select(
                exists()
                .where(OrderItem.order_id == Order.id)
                .where(Order.user_id == user_id, OrderItem.product_id == product_id)
            )
        )

    async def exists_for_product(self, product_id: uuid.UUID) -> bool:
        return await self.session.scalar(
            select(exists().where(OrderItem.product_id == product_id))
        )

class SQLReviewStore(_SQLStore):
    model = Review

    async def list_for_product(self, product_id: uuid.UUID) -> List[ReviewWithUser]:
        result = await self.session.execute(
            select(Review, User.username)
            .outerjoin(User, Review.user_id == User.id)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return [
            ReviewWithUser(review=review, username=username or "Unknown User")
            for review, username in result.all()
        ]

    async def list_for_user(self, user_id: uuid.UUID) -> List[Review]:
        result = await self.session.execute(
            select(Review)
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, review_id: uuid.UUID) -> Optional[Review]:
        return await self._get(review_id)

    async def create(self, data: Dict[str, Any]) -> Review:
        return await self._create(data)

    async def set_helpful(self, review_id: uuid.UUID, helpful: int) -> Optional[Review]:
        return await self._update(review_id, {"helpful": helpful})

    async def delete_for_product(self, product_id: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(Review)
            .where(Review.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(Review)
            .where(Review.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

class SQLWishlistStore(_SQLStore):
    model = WishlistItem

    async def list_for_user(self, user_id: uuid.UUID) -> List[WishlistEntry]:
        result = await self.session.execute(
            select(WishlistItem, Product)
            .join(Product, WishlistItem.product_id == Product.id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return [WishlistEntry(item=item, product=product) for item, product in result.all()]

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Tuple[WishlistItem, bool]:
        result = await self.session.execute(
            select(WishlistItem).where(
                WishlistItem.user_id == user_id,
                WishlistItem.product_id == product_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing, False
        item = await self._create({"user_id": user_id, "product_id": product_id})
        return item, True

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(WishlistItem)
            .where(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def remove_product(self, product_id: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(WishlistItem)
            .where(WishlistItem.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def clear_user(self, user_id: uuid.UUID) -> int:
        result = await self.session.execute(
            delete(WishlistItem)
            .where(WishlistItem.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

class SQLStorage:
    """Storage bound to one AsyncSession"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = SQLUserStore(session)
        self.products = SQLProductStore(session)
        self.categories = SQLCategoryStore(session)
        self.carts = SQLCartStore(session)
        self.orders = SQLOrderStore(session)
        self.order_items = SQLOrderItemStore(session)
        self.reviews = SQLReviewStore(session)
        self.wishlist = SQLWishlistStore(session)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator["SQLStorage", None]:
        """Commit the block's writes together, or roll all of them back"""
        try:
            yield self
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

class SQLStorageProvider:
    """Opens one session-backed storage per request"""

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[SQLStorage, None]:
        async with get_db_context() as session:
            yield SQLStorage(session)
