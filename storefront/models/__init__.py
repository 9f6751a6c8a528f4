"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .category import Category
from .product import Product
from .cart import CartItem
from .order import Order, OrderItem, OrderStatus
from .review import Review
from .wishlist import WishlistItem

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Category",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Review",
    "WishlistItem",
]
