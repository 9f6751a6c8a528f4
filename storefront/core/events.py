"""
Application lifecycle events
Handles startup and shutdown tasks
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from .config import settings
from .database import init_db, close_db
from .logging import setup_logging
from storefront.storage import SQLStorageProvider

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    setup_logging()
    uses_database = isinstance(app.state.storage_provider, SQLStorageProvider)
    backend = "sql" if uses_database else "memory"
    logger.info(f"Starting {settings.APP_NAME} ({backend} storage)...")

    try:
        if uses_database and settings.DB_AUTO_CREATE:
            await init_db()
            logger.info("Database initialized")

        # Import registers the tasks with the Celery app
        from storefront.tasks import email_tasks  # noqa: F401
        logger.info("Celery app initialized")

        yield

    finally:
        logger.info(f"Shutting down {settings.APP_NAME}...")
        await close_db()
        logger.info(f"{settings.APP_NAME} shutdown complete")
