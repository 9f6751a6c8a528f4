"""
Authentication service
Handles account registration and credential checks
"""

from typing import Any, Dict
import logging

from storefront.core.exceptions import DuplicateResourceException, UnauthorizedException
from storefront.core.security import SecurityUtils
from storefront.models import User, UserRole
from storefront.storage import Storage
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def register(self, data: RegisterRequest) -> Dict[str, Any]:
        """Create a regular user account and issue tokens"""
        if await self.storage.users.get_by_username(data.username):
            raise DuplicateResourceException("User", "username", data.username)

        async with self.storage.transaction():
            user = await self.storage.users.create({
                "username": data.username,
                "email": data.email,
                "password_hash": SecurityUtils.hash_password(data.password),
                "role": UserRole.USER,
            })

        logger.info(f"Registered user {user.username} ({user.id})")
        return {"user": user, **SecurityUtils.create_token_pair(user)}

    async def authenticate(self, data: LoginRequest) -> User:
        user = await self.storage.users.get_by_username(data.username)
        if user is None or not SecurityUtils.verify_password(data.password, user.password_hash):
            logger.warning(f"Failed login attempt for {data.username}")
            raise UnauthorizedException("Invalid username or password", error_code="INVALID_CREDENTIALS")
        return user

    async def login(self, data: LoginRequest) -> Dict[str, Any]:
        user = await self.authenticate(data)
        logger.info(f"User {user.username} logged in")
        return {"user": user, **SecurityUtils.create_token_pair(user)}
