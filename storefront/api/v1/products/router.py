"""Products API router"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional
import uuid

from storefront.api.v1.auth.dependencies import require_admin
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import ProductCreate, ProductResponse, ProductUpdate
from .services import ProductService

router = APIRouter()

@router.get("", response_model=List[ProductResponse])
async def list_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    subcategory: Optional[str] = Query(None, description="Filter by subcategory; takes precedence"),
    storage: Storage = Depends(get_storage)
):
    """List catalog products"""
    service = ProductService(storage)
    return await service.list_products(category=category, subcategory=subcategory)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: uuid.UUID, storage: Storage = Depends(get_storage)):
    service = ProductService(storage)
    return await service.get_product(product_id)

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = ProductService(storage)
    return await service.create_product(data)

@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update product fields; a new inventory value also resets inStock"""
    service = ProductService(storage)
    return await service.update_product(product_id, data)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid.UUID,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = ProductService(storage)
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
