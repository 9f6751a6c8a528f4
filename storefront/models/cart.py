"""
Shopping cart model
Cart lines are grouped by an opaque session identifier
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, CreatedAtModel, UUIDModel

class CartItem(Base, CreatedAtModel, UUIDModel):
    """Shopping cart line"""

    __tablename__ = "cart_items"

    session_id = Column(String(255), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Relationships
    product = relationship("Product", back_populates="cart_items")

    # Constraints
    __table_args__ = (
        UniqueConstraint("session_id", "product_id", name="uq_session_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        Index("idx_cart_items_session", "session_id"),
        Index("idx_cart_items_product", "product_id"),
    )
