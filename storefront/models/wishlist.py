"""
Wishlist model for saved products
"""

from sqlalchemy import Column, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, CreatedAtModel, UUIDModel

class WishlistItem(Base, CreatedAtModel, UUIDModel):
    """User wishlist items"""

    __tablename__ = "wishlist_items"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)

    # Relationships
    user = relationship("User", back_populates="wishlist_items")
    product = relationship("Product", back_populates="wishlist_items")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_wishlist"),
        Index("idx_wishlist_user", "user_id"),
    )
