"""Store behaviour shared by both backends, plus backend-specific checks."""

import asyncio
from decimal import Decimal

import pytest

from storefront.core.config import Settings
from storefront.core.database import close_db, drop_db, init_db
from storefront.storage import (
    MemoryStorage,
    MemoryStorageProvider,
    SQLStorageProvider,
    build_storage_provider,
)


@pytest.fixture(params=["memory", "sql"])
async def storage(request):
    if request.param == "memory":
        yield MemoryStorage()
        return

    await drop_db()
    await init_db()
    async with SQLStorageProvider().session() as sql_storage:
        yield sql_storage
    await close_db()


async def create_product(storage, inventory=10, price="10.00"):
    async with storage.transaction():
        return await storage.products.create({
            "name": "Shirt",
            "description": "Shirt description",
            "image_url": "https://example.com/image.jpg",
            "category": "ladies",
            "subcategory": "shirts-blouses",
            "price": Decimal(price),
            "inventory": inventory,
            "in_stock": inventory is None or inventory > 0,
        })


class TestInventoryDecrement:
    async def test_decrement(self, storage):
        product = await create_product(storage, inventory=10)

        async with storage.transaction():
            updated = await storage.products.decrement_inventory(product.id, 3)

        assert updated.inventory == 7
        assert updated.in_stock is True

    async def test_floor_at_zero(self, storage):
        product = await create_product(storage, inventory=2)

        async with storage.transaction():
            updated = await storage.products.decrement_inventory(product.id, 5)

        assert updated.inventory == 0
        assert updated.in_stock is False

    async def test_exact_quantity_sells_out(self, storage):
        product = await create_product(storage, inventory=3)

        async with storage.transaction():
            updated = await storage.products.decrement_inventory(product.id, 3)

        assert updated.inventory == 0
        assert updated.in_stock is False

    async def test_untracked_inventory(self, storage):
        product = await create_product(storage, inventory=None)

        async with storage.transaction():
            updated = await storage.products.decrement_inventory(product.id, 4)

        assert updated.inventory is None
        assert updated.in_stock is True


class TestCartStore:
    async def test_add_increments_existing_line(self, storage):
        product = await create_product(storage)

        async with storage.transaction():
            first = await storage.carts.add("session-1", product.id, 1)
            second = await storage.carts.add("session-1", product.id, 2)

        assert second.id == first.id
        lines = await storage.carts.list_lines("session-1")
        assert [line.quantity for line in lines] == [3]
        assert lines[0].unit_price == Decimal("10.00")

    async def test_clear_only_touches_one_session(self, storage):
        product = await create_product(storage)
        async with storage.transaction():
            await storage.carts.add("session-1", product.id, 1)
            await storage.carts.add("session-2", product.id, 1)

        async with storage.transaction():
            removed = await storage.carts.clear("session-1")

        assert removed == 1
        assert await storage.carts.list_lines("session-1") == []
        assert len(await storage.carts.list_lines("session-2")) == 1


class TestConcurrentDecrements:
    @pytest.mark.parametrize("start, first, second", [(10, 3, 4), (5, 3, 4), (2, 2, 1)])
    async def test_parallel_sessions_do_not_lose_updates(self, start, first, second):
        await drop_db()
        await init_db()
        try:
            async with SQLStorageProvider().session() as storage:
                product = await create_product(storage, inventory=start)
                product_id = product.id

            async def decrement(quantity):
                async with SQLStorageProvider().session() as storage:
                    async with storage.transaction():
                        await storage.products.decrement_inventory(product_id, quantity)

            await asyncio.gather(decrement(first), decrement(second))

            async with SQLStorageProvider().session() as storage:
                product = await storage.products.get(product_id)
            expected = max(0, start - first - second)
            assert product.inventory == expected
            assert product.in_stock is (expected > 0)
        finally:
            await close_db()


class TestTransactions:
    async def test_failed_block_discards_writes(self, storage):
        product = await create_product(storage, inventory=5)
        product_id = product.id
        async with storage.transaction():
            await storage.carts.add("session-1", product_id, 2)

        with pytest.raises(RuntimeError):
            async with storage.transaction():
                await storage.products.decrement_inventory(product_id, 2)
                await storage.carts.clear("session-1")
                raise RuntimeError("boom")

        assert (await storage.products.get(product_id)).inventory == 5
        assert len(await storage.carts.list_lines("session-1")) == 1


class TestStorageProviders:
    def test_build_memory_provider(self):
        provider = build_storage_provider(Settings(STORAGE_BACKEND="memory"))
        assert isinstance(provider, MemoryStorageProvider)

    def test_build_sql_provider(self):
        provider = build_storage_provider(Settings(STORAGE_BACKEND="sql"))
        assert isinstance(provider, SQLStorageProvider)

    async def test_memory_provider_shares_one_storage(self):
        storage = MemoryStorage()
        provider = MemoryStorageProvider(storage)

        async with provider.session() as first, provider.session() as second:
            assert first is storage
            assert second is storage
