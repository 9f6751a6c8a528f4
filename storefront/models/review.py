"""
Product review and rating model
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class Review(Base, TimestampedModel, UUIDModel):
    """Product reviews and ratings"""

    __tablename__ = "product_reviews"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # Review content
    rating = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    comment = Column(Text, nullable=True)

    # Verification
    verified = Column(Boolean, default=False, nullable=False)

    # Engagement
    helpful = Column(Integer, default=0, nullable=False)

    # Relationships
    product = relationship("Product", back_populates="reviews")
    user = relationship("User", back_populates="reviews")

    # Constraints
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        Index("idx_reviews_product", "product_id"),
        Index("idx_reviews_user", "user_id"),
    )
