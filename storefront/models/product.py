"""Product model using base mixins"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, Index, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class Product(Base, TimestampedModel, UUIDModel):
    """Catalog entry with an inventory counter"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=False)

    # Categorization
    category = Column(String(100), nullable=False, index=True)
    subcategory = Column(String(100), nullable=False, index=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)

    # Inventory (NULL means the product's stock is not tracked)
    in_stock = Column(Boolean, default=True, nullable=False)
    inventory = Column(Integer, nullable=True)

    # Relationships
    cart_items = relationship("CartItem", back_populates="product")
    order_items = relationship("OrderItem", back_populates="product")
    reviews = relationship("Review", back_populates="product")
    wishlist_items = relationship("WishlistItem", back_populates="product")

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        CheckConstraint("inventory >= 0", name="check_non_negative_inventory"),
        Index("idx_products_category_subcategory", "category", "subcategory"),
    )

    @property
    def tracks_inventory(self) -> bool:
        return self.inventory is not None
