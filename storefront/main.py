"""Main FastAPI application"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from typing import Optional

from storefront.api.health import router as health_router
from storefront.api.v1 import api_router
from storefront.core.config import settings
from storefront.core.events import lifespan
from storefront.core.exceptions import StorefrontException, storefront_exception_handler
from storefront.core.middleware import setup_middleware
from storefront.middleware.rate_limit import custom_rate_limit_handler, limiter
from storefront.storage import StorageProvider, build_storage_provider

def create_app(storage_provider: Optional[StorageProvider] = None) -> FastAPI:
    """Build the application; the storage provider defaults to STORAGE_BACKEND"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Storefront API: catalog, cart, checkout and order management",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    app.state.storage_provider = storage_provider or build_storage_provider(settings)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_exception_handler(StorefrontException, storefront_exception_handler)

    setup_middleware(app)

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/api/docs",
            "health": "/health"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
