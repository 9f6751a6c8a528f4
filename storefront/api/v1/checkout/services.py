"""
Checkout service
Turns the caller's cart into an order in a single storage transaction
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional
import logging
import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.api.v1.cart.services import cart_session_key
from storefront.core.config import settings
from storefront.core.exceptions import (
    EmptyCartException,
    InvalidInputException,
    PersistenceFailureException,
    UnauthorizedException,
)
from storefront.models import Order, OrderStatus
from storefront.models.base import to_dict
from storefront.storage import CartLine, Storage, StorageError

logger = logging.getLogger(__name__)

Notifier = Callable[[Dict[str, Any]], Any]

@dataclass
class CheckoutResult:
    order: Order
    # False when an earlier order with the same checkout token was returned
    created: bool = True

def _dispatch_confirmation_email(payload: Dict[str, Any]) -> None:
    from storefront.tasks.email_tasks import send_order_confirmation_email
    send_order_confirmation_email.delay(payload)

class CheckoutService:
    """
    Order pipeline

    Preconditions are checked before anything is written. The order,
    its items, the inventory decrements and the cart clear are applied
    inside one transaction, so a storage failure leaves no partial order.
    """

    def __init__(self, storage: Storage, notifier: Optional[Notifier] = None):
        self.storage = storage
        self.notifier = notifier or _dispatch_confirmation_email

    async def checkout(
        self,
        user_id: Optional[uuid.UUID],
        shipping_address: Optional[str],
        checkout_token: Optional[str] = None
    ) -> CheckoutResult:
        if user_id is None:
            raise UnauthorizedException("Authentication required")

        address = (shipping_address or "").strip()
        if not address:
            raise InvalidInputException("Shipping address is required")

        session_id = cart_session_key(user_id)

        if checkout_token:
            existing = await self.storage.orders.get_by_checkout_token(user_id, checkout_token)
            if existing is not None:
                logger.info(f"Checkout token {checkout_token} already used by order {existing.id}")
                return CheckoutResult(order=existing, created=False)

        try:
            async with self.storage.transaction():
                lines = await self._resolve_lines(session_id)
                if not lines:
                    logger.info(f"Checkout failed: cart is empty for {session_id}")
                    raise EmptyCartException()

                order = await self._place_order(user_id, address, lines, checkout_token)
        except IntegrityError as exc:
            # A concurrent request with the same token committed first
            if checkout_token:
                existing = await self.storage.orders.get_by_checkout_token(user_id, checkout_token)
                if existing is not None:
                    return CheckoutResult(order=existing, created=False)
            logger.exception(f"Checkout failed for user {user_id}")
            raise PersistenceFailureException() from exc
        except (SQLAlchemyError, StorageError) as exc:
            logger.exception(f"Checkout failed for user {user_id}")
            raise PersistenceFailureException() from exc

        logger.info(
            f"Order {order.id} placed by user {user_id}: "
            f"{len(lines)} item(s), total {settings.CURRENCY_SYMBOL}{order.total}"
        )
        await self._send_confirmation(order, len(lines))
        return CheckoutResult(order=order, created=True)

    async def _resolve_lines(self, session_id: str) -> List[CartLine]:
        """Cart lines with a live product; stale lines are skipped"""
        lines = await self.storage.carts.list_lines(session_id)
        logger.info(f"Checkout: found {len(lines)} cart line(s) for {session_id}")

        resolved = []
        for line in lines:
            if line.product is None:
                logger.warning(
                    f"Skipping cart line {line.id}: product {line.product_id} no longer exists"
                )
                continue
            resolved.append(line)
        return resolved

    @staticmethod
    def compute_total(lines: List[CartLine]) -> Decimal:
        total = Decimal("0")
        for line in lines:
            if line.product.price is None:
                logger.warning(f"Product {line.product_id} has no price; counted as 0")
            total += line.unit_price * line.quantity
        return total

    async def _place_order(
        self,
        user_id: uuid.UUID,
        address: str,
        lines: List[CartLine],
        checkout_token: Optional[str]
    ) -> Order:
        # Demo flow: payment is simulated, so the order starts as processing
        order = await self.storage.orders.create({
            "user_id": user_id,
            "status": OrderStatus.PROCESSING,
            "total": self.compute_total(lines),
            "shipping_address": address,
            "checkout_token": checkout_token,
        })

        for line in lines:
            await self.storage.order_items.create({
                "order_id": order.id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "price": line.unit_price,
            })
            await self.storage.products.decrement_inventory(line.product_id, line.quantity)

        await self.storage.carts.clear(cart_session_key(user_id))
        return order

    async def _send_confirmation(self, order: Order, item_count: int) -> None:
        """Queue the confirmation email; failures never undo the order"""
        try:
            user = await self.storage.users.get(order.user_id)
            payload = {
                "order": to_dict(order),
                "item_count": item_count,
                "username": user.username if user else None,
                "email": user.email if user else None,
                "currency": settings.CURRENCY_SYMBOL,
            }
            self.notifier(payload)
        except Exception:
            logger.exception(f"Could not dispatch confirmation email for order {order.id}")
