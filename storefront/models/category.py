"""Catalog category model"""

from sqlalchemy import Column, String, ForeignKey, Uuid

from .base import Base, CreatedAtModel, UUIDModel

class Category(Base, CreatedAtModel, UUIDModel):
    """Product category, optionally nested under a parent"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=True)
