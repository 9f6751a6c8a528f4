"""
Storage backends
The provider is chosen once at startup and kept on app.state
"""

from typing import AsyncGenerator

from fastapi import Request

from storefront.core.config import Settings
from .base import CartLine, ReviewWithUser, Storage, StorageError, StorageProvider, WishlistEntry
from .memory import MemoryStorage, MemoryStorageProvider
from .sql import SQLStorage, SQLStorageProvider

def build_storage_provider(config: Settings) -> StorageProvider:
    """Create the provider named by STORAGE_BACKEND"""
    backend = config.STORAGE_BACKEND.lower()
    if backend == "sql":
        return SQLStorageProvider()
    if backend == "memory":
        return MemoryStorageProvider()
    raise ValueError(f"Unknown STORAGE_BACKEND '{config.STORAGE_BACKEND}'")

async def get_storage(request: Request) -> AsyncGenerator[Storage, None]:
    """Request-scoped storage dependency"""
    provider: StorageProvider = request.app.state.storage_provider
    async with provider.session() as storage:
        yield storage

__all__ = [
    "CartLine",
    "MemoryStorage",
    "MemoryStorageProvider",
    "ReviewWithUser",
    "SQLStorage",
    "SQLStorageProvider",
    "Storage",
    "StorageError",
    "StorageProvider",
    "WishlistEntry",
    "build_storage_provider",
    "get_storage",
]
