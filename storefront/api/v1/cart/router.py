"""Cart router with guest session handling"""

from fastapi import APIRouter, Depends, Request, Response, status
from typing import Optional
import uuid

from storefront.api.v1.auth.dependencies import get_current_user_optional
from storefront.models import User
from storefront.storage import Storage, get_storage
from .schemas import CartItemCreate, CartItemResponse, CartItemUpdate, CartResponse
from .services import CartService, cart_session_key

router = APIRouter()

GUEST_SESSION_KEY = "cart_session_id"

def resolve_session_id(request: Request, user: Optional[User], create: bool = False) -> Optional[str]:
    """Cart key for the caller: the user key when logged in, else the guest cookie id"""
    if user is not None:
        return cart_session_key(user.id)

    session_id = request.session.get(GUEST_SESSION_KEY)
    if session_id is None and create:
        session_id = str(uuid.uuid4())
        request.session[GUEST_SESSION_KEY] = session_id
    return session_id

@router.get("", response_model=CartResponse)
async def get_cart(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """Get cart (supports both authenticated and session-based)"""
    service = CartService(storage)
    return await service.get_cart(resolve_session_id(request, current_user))

@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    item_data: CartItemCreate,
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """Add item to cart"""
    service = CartService(storage)
    session_id = resolve_session_id(request, current_user, create=True)
    return await service.add_to_cart(session_id, item_data.product_id, item_data.quantity)

@router.put("/{item_id}", response_model=CartItemResponse)
async def update_cart_item(
    item_id: uuid.UUID,
    update_data: CartItemUpdate,
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """Update cart item quantity"""
    service = CartService(storage)
    return await service.update_cart_item(
        resolve_session_id(request, current_user), item_id, update_data.quantity
    )

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(
    item_id: uuid.UUID,
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """Remove item from cart"""
    service = CartService(storage)
    await service.remove_from_cart(resolve_session_id(request, current_user), item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    storage: Storage = Depends(get_storage)
):
    """Clear cart"""
    service = CartService(storage)
    await service.clear_cart(resolve_session_id(request, current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
