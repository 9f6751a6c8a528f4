"""
User administration service
"""

from typing import List
import logging
import uuid

from storefront.api.v1.cart.services import cart_session_key
from storefront.core.exceptions import (
    ConflictException,
    DuplicateResourceException,
    ForbiddenException,
    NotFoundException,
)
from storefront.core.security import SecurityUtils
from storefront.models import User
from storefront.storage import Storage
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    """Admin user management"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_users(self) -> List[User]:
        return await self.storage.users.list()

    async def create_user(self, data: UserCreate) -> User:
        if await self.storage.users.get_by_username(data.username):
            raise DuplicateResourceException("User", "username", data.username)

        async with self.storage.transaction():
            user = await self.storage.users.create({
                "username": data.username,
                "email": data.email,
                "password_hash": SecurityUtils.hash_password(data.password),
                "role": data.role,
            })

        logger.info(f"Admin created user {user.username} ({user.role.value})")
        return user

    async def update_user(self, user_id: uuid.UUID, data: UserUpdate, admin: User) -> User:
        if user_id == admin.id:
            raise ForbiddenException("Cannot modify your own admin account")
        if await self.storage.users.get(user_id) is None:
            raise NotFoundException("User not found")

        values = data.model_dump(exclude_unset=True, exclude={"password"})
        if values.get("username"):
            owner = await self.storage.users.get_by_username(values["username"])
            if owner is not None and owner.id != user_id:
                raise DuplicateResourceException("User", "username", values["username"])
        if data.password:
            values["password_hash"] = SecurityUtils.hash_password(data.password)
        # Columns that cannot be cleared
        for field in ("username", "role"):
            if field in values and values[field] is None:
                values.pop(field)

        async with self.storage.transaction():
            user = await self.storage.users.update(user_id, values)

        logger.info(f"Admin {admin.username} updated user {user_id}")
        return user

    async def delete_user(self, user_id: uuid.UUID, admin: User) -> None:
        """Delete a user without orders, with their reviews, wishlist and cart"""
        if user_id == admin.id:
            raise ForbiddenException("Cannot delete your own admin account")
        if await self.storage.users.get(user_id) is None:
            raise NotFoundException("User not found")
        if await self.storage.orders.count_for_user(user_id):
            raise ConflictException("User has orders and cannot be deleted", error_code="USER_HAS_ORDERS")

        async with self.storage.transaction():
            await self.storage.reviews.delete_for_user(user_id)
            await self.storage.wishlist.clear_user(user_id)
            await self.storage.carts.clear(cart_session_key(user_id))
            await self.storage.users.delete(user_id)

        logger.info(f"Admin {admin.username} deleted user {user_id}")
