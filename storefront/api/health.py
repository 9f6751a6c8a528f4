"""Health check endpoints"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from typing import Any, Dict
import logging

from storefront.core.config import settings
from storefront.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/health/detailed")
async def detailed_health_check(storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    """Health check including a storage round trip"""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {}
    }

    try:
        await storage.categories.list()
        health_status["components"]["storage"] = {
            "status": "healthy",
            "backend": settings.STORAGE_BACKEND
        }
    except Exception as e:
        logger.exception("Storage health check failed")
        health_status["components"]["storage"] = {
            "status": "unhealthy",
            "backend": settings.STORAGE_BACKEND,
            "error": str(e)
        }
        health_status["status"] = "unhealthy"

    return health_status
