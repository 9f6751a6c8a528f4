"""
User administration endpoints
"""

from fastapi import APIRouter, Depends, Response, status
from typing import List
import uuid

from storefront.api.v1.auth.dependencies import require_admin
from storefront.api.v1.auth.schemas import UserResponse
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import UserCreate, UserUpdate
from .services import UserService

router = APIRouter()

@router.get("", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = UserService(storage)
    return await service.list_users()

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = UserService(storage)
    return await service.create_user(data)

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    data: UserUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update another user's account; admins cannot edit themselves here"""
    service = UserService(storage)
    return await service.update_user(user_id, data, admin)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = UserService(storage)
    await service.delete_user(user_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
