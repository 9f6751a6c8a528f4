"""
Category API router
"""

from fastapi import APIRouter, Depends, Response, status
from typing import List
import uuid

from storefront.api.v1.auth.dependencies import require_admin
from storefront.models import User
from storefront.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from storefront.storage import Storage, get_storage
from . import crud

router = APIRouter()

@router.get("", response_model=List[CategoryResponse])
async def list_categories(storage: Storage = Depends(get_storage)):
    return await crud.get_categories(storage)

@router.get("/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, storage: Storage = Depends(get_storage)):
    """Get category by slug"""
    return await crud.get_category_by_slug(storage, slug)

@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    return await crud.create_category(storage, data)

@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    data: CategoryUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    return await crud.update_category(storage, category_id, data)

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: uuid.UUID,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    await crud.delete_category(storage, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
