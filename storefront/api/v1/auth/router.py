"""
Authentication endpoints
"""

from fastapi import APIRouter, Depends, Request, status

from storefront.middleware.rate_limit import auth_limiter
from storefront.models import User
from storefront.storage import Storage, get_storage
from .dependencies import get_current_user
from .schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from .services import AuthService

router = APIRouter()

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@auth_limiter
async def register(
    request: Request,
    data: RegisterRequest,
    storage: Storage = Depends(get_storage)
):
    """Create an account and return an access/refresh token pair"""
    service = AuthService(storage)
    return await service.register(data)

@router.post("/login", response_model=AuthResponse)
@auth_limiter
async def login(
    request: Request,
    data: LoginRequest,
    storage: Storage = Depends(get_storage)
):
    """Exchange username and password for tokens"""
    service = AuthService(storage)
    return await service.login(data)

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
