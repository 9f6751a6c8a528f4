"""Order notification tasks"""

from celery import Task
from celery.utils.log import get_task_logger
from typing import Any, Dict

from storefront.core.celery_app import celery_app

logger = get_task_logger(__name__)

class EmailTask(Task):
    """Base email task with retry logic"""
    autoretry_for = (Exception,)
    retry_kwargs = {"max_retries": 3}
    retry_backoff = True
    retry_backoff_max = 600
    retry_jitter = True

@celery_app.task(base=EmailTask, name="send_order_confirmation_email")
def send_order_confirmation_email(payload: Dict[str, Any]):
    """
    Send order confirmation email
    No mail transport is configured; the message is written to the log
    """
    order = payload["order"]
    recipient = payload.get("email") or payload.get("username") or order["user_id"]
    currency = payload.get("currency", "")

    lines = [
        f"To: {recipient}",
        f"Subject: Order confirmation #{order['id']}",
        f"Order ID: {order['id']}",
        f"Total: {currency}{order['total']}",
        f"Items: {payload.get('item_count', 0)}",
        f"Shipping address: {order['shipping_address']}",
        "Status: Processing (demo, automatically paid)",
    ]
    logger.info("Mock order confirmation email\n" + "\n".join(lines))

    return {"success": True, "order_id": order["id"]}
