"""
Authentication dependencies and utilities
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import uuid

from storefront.core.exceptions import ForbiddenException, UnauthorizedException
from storefront.core.security import SecurityUtils
from storefront.models import User
from storefront.storage import Storage, get_storage

# auto_error=False so a missing header reaches our own 401 instead of a 403
security = HTTPBearer(auto_error=False)

async def _resolve_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    storage: Storage
) -> Optional[User]:
    if credentials is None:
        return None

    payload = SecurityUtils.decode_token(credentials.credentials)
    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    try:
        user_id = uuid.UUID(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Invalid authentication credentials")

    user = await storage.users.get(user_id)
    if user is None:
        raise UnauthorizedException("User not found")

    # Rate limit key
    request.state.user_id = str(user.id)
    return user

async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage)
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise None
    Useful for endpoints that work for both authenticated and anonymous users
    """
    try:
        return await _resolve_user(request, credentials, storage)
    except UnauthorizedException:
        return None

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage)
) -> User:
    """
    Get current authenticated user (required)
    Raises 401 if not authenticated or user not found
    """
    user = await _resolve_user(request, credentials, storage)
    if user is None:
        raise UnauthorizedException("Not authenticated")
    return user

async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Get current user and ensure they have admin privileges"""
    if not current_user.is_admin:
        raise ForbiddenException("Not authorized")
    return current_user
