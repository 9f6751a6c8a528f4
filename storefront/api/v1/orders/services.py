"""
Order service
Order history for customers and status management for admins
"""

from typing import List
import logging
import uuid

from storefront.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from storefront.models import Order, OrderItem, OrderStatus, User
from storefront.storage import Storage
from .state_machine import order_state_machine

logger = logging.getLogger(__name__)

class OrderService:
    """Order service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_user_orders(self, user: User) -> List[Order]:
        return await self.storage.orders.list_for_user(user.id)

    async def list_all_orders(self) -> List[Order]:
        return await self.storage.orders.list()

    async def get_order(self, order_id: uuid.UUID, user: User) -> Order:
        """Get an order visible to the caller (its owner or an admin)"""
        order = await self.storage.orders.get(order_id)
        if order is None:
            raise NotFoundException("Order not found")
        if order.user_id != user.id and not user.is_admin:
            raise ForbiddenException("Access denied")
        return order

    async def get_order_items(self, order_id: uuid.UUID, user: User) -> List[OrderItem]:
        order = await self.get_order(order_id, user)
        return await self.storage.order_items.list_for_order(order.id)

    async def update_status(self, order_id: uuid.UUID, status_value: str) -> Order:
        """Set any of the five statuses; transition order is not enforced"""
        try:
            new_status = OrderStatus(status_value.strip().lower())
        except ValueError:
            raise BadRequestException("Invalid status", error_code="INVALID_STATUS")

        order = await self.storage.orders.get(order_id)
        if order is None:
            raise NotFoundException("Order not found")

        previous = order.status
        if previous != new_status and not order_state_machine.can_transition(previous, new_status):
            logger.warning(f"Order {order_id}: off-path status change {previous.value} -> {new_status.value}")

        async with self.storage.transaction():
            order = await self.storage.orders.update_status(order_id, new_status)

        logger.info(f"Order {order_id} status {previous.value} -> {new_status.value}")
        return order
