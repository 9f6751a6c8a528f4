"""
Product catalog service
"""

from typing import Any, Dict, List, Optional
import logging
import uuid

from storefront.core.exceptions import ConflictException, NotFoundException
from storefront.models import Product
from storefront.storage import Storage
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

def sync_stock_flag(data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep in_stock equal to inventory > 0 whenever a tracked inventory is written"""
    if data.get("inventory") is not None:
        data["in_stock"] = data["inventory"] > 0
    return data

class ProductService:
    """Catalog reads and admin edits"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_products(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None
    ) -> List[Product]:
        return await self.storage.products.list(category=category, subcategory=subcategory)

    async def get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.storage.products.get(product_id)
        if product is None:
            raise NotFoundException("Product not found")
        return product

    async def create_product(self, data: ProductCreate) -> Product:
        values = data.model_dump()
        if values.get("in_stock") is None:
            values["in_stock"] = True
        sync_stock_flag(values)

        async with self.storage.transaction():
            product = await self.storage.products.create(values)

        logger.info(f"Created product {product.id} ({product.name})")
        return product

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> Product:
        values = sync_stock_flag(data.model_dump(exclude_unset=True))
        if values.get("in_stock", True) is None:
            values.pop("in_stock")

        async with self.storage.transaction():
            product = await self.storage.products.update(product_id, values)
            if product is None:
                raise NotFoundException("Product not found")

        logger.info(f"Updated product {product_id}: {sorted(values)}")
        return product

    async def delete_product(self, product_id: uuid.UUID) -> None:
        """Delete a product that no order references, with its cart, wishlist and review rows"""
        if await self.storage.products.get(product_id) is None:
            raise NotFoundException("Product not found")
        if await self.storage.order_items.exists_for_product(product_id):
            raise ConflictException(
                "Product appears in existing orders and cannot be deleted",
                error_code="PRODUCT_IN_USE"
            )

        async with self.storage.transaction():
            await self.storage.carts.remove_product(product_id)
            await self.storage.wishlist.remove_product(product_id)
            await self.storage.reviews.delete_for_product(product_id)
            await self.storage.products.delete(product_id)

        logger.info(f"Deleted product {product_id}")
