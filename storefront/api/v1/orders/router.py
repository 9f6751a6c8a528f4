"""
Orders API router
"""

from fastapi import APIRouter, Depends
from typing import List
import uuid

from storefront.api.v1.auth.dependencies import get_current_user, require_admin
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import OrderItemResponse, OrderResponse, OrderStatusUpdate
from .services import OrderService

router = APIRouter()

@router.get("/mine", response_model=List[OrderResponse])
async def list_my_orders(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    """Caller's orders, newest first"""
    service = OrderService(storage)
    return await service.list_user_orders(current_user)

@router.get("", response_model=List[OrderResponse])
async def list_orders(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    service = OrderService(storage)
    return await service.list_all_orders()

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    service = OrderService(storage)
    return await service.get_order(order_id, current_user)

@router.get("/{order_id}/items", response_model=List[OrderItemResponse])
async def get_order_items(
    order_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    service = OrderService(storage)
    return await service.get_order_items(order_id, current_user)

@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    data: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update order status (admin)"""
    service = OrderService(storage)
    return await service.update_status(order_id, data.status)
