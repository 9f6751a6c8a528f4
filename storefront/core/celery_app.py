"""Celery application configuration"""

from celery import Celery
from kombu import Exchange, Queue

from storefront.core.config import settings

# Create Celery app
celery_app = Celery(
    "storefront",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["storefront.tasks.email_tasks"]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    # Run tasks inline when no worker is deployed
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,

    task_default_queue="default",
    task_routes={
        "send_order_confirmation_email": {"queue": "email"},
    },

    # Retry configuration
    task_default_retry_delay=60,
    task_max_retries=3,

    result_expires=3600,
)

celery_app.conf.task_queues = (
    Queue("default", Exchange("default"), routing_key="default"),
    Queue("email", Exchange("email"), routing_key="email"),
)
