"""Order and order item models"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, Index, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class Order(Base, TimestampedModel, UUIDModel):
    """Customer order created at checkout"""

    __tablename__ = "orders"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    total = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(Text, nullable=False)

    # Idempotency key supplied by the client for a checkout attempt
    checkout_token = Column(String(100), nullable=True)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order")

    __table_args__ = (
        UniqueConstraint("user_id", "checkout_token", name="uq_order_user_checkout_token"),
        Index("idx_orders_user_created", "user_id", "created_at"),
    )

class OrderItem(Base, UUIDModel):
    """Snapshot of one cart line at the time the order was placed"""

    __tablename__ = "order_items"

    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_order_quantity"),
        Index("idx_order_items_order", "order_id"),
        Index("idx_order_items_product", "product_id"),
    )
