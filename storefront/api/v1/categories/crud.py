"""
Category CRUD operations
"""

from typing import List, Optional
import uuid

from storefront.core.exceptions import BadRequestException, DuplicateResourceException, NotFoundException
from storefront.models import Category
from storefront.schemas.category import CategoryCreate, CategoryUpdate
from storefront.storage import Storage

async def get_categories(storage: Storage) -> List[Category]:
    return await storage.categories.list()

async def get_category_by_slug(storage: Storage, slug: str) -> Category:
    category = await storage.categories.get_by_slug(slug)
    if category is None:
        raise NotFoundException("Category not found")
    return category

async def _check_parent(storage: Storage, parent_id: Optional[uuid.UUID], category_id: Optional[uuid.UUID] = None) -> None:
    if parent_id is None:
        return
    if parent_id == category_id:
        raise BadRequestException("A category cannot be its own parent")
    if await storage.categories.get(parent_id) is None:
        raise BadRequestException("Parent category not found")

async def create_category(storage: Storage, data: CategoryCreate) -> Category:
    """Create category with a unique slug"""
    if await storage.categories.get_by_slug(data.slug):
        raise DuplicateResourceException("Category", "slug", data.slug)
    await _check_parent(storage, data.parent_id)

    async with storage.transaction():
        return await storage.categories.create(data.model_dump())

async def update_category(storage: Storage, category_id: uuid.UUID, data: CategoryUpdate) -> Category:
    """Update category; the slug must stay unique"""
    if await storage.categories.get(category_id) is None:
        raise NotFoundException("Category not found")

    values = data.model_dump(exclude_unset=True)
    if values.get("slug"):
        owner = await storage.categories.get_by_slug(values["slug"])
        if owner is not None and owner.id != category_id:
            raise BadRequestException("Slug already exists", error_code="DUPLICATE_RESOURCE")
    await _check_parent(storage, values.get("parent_id"), category_id)

    async with storage.transaction():
        return await storage.categories.update(category_id, values)

async def delete_category(storage: Storage, category_id: uuid.UUID) -> None:
    """Delete category; subcategories are detached, not removed"""
    async with storage.transaction():
        if not await storage.categories.delete(category_id):
            raise NotFoundException("Category not found")
