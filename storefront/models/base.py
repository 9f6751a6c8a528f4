"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
from datetime import datetime
from decimal import Decimal
import enum
from typing import Any, Dict, Optional
import uuid

# Create declarative base
class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now()
        )

class CreatedAtModel:
    """Mixin for rows that are written once"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now()
        )

class UUIDModel:
    """Mixin for adding UUID primary key"""

    @declared_attr
    def id(cls):
        return Column(
            Uuid(as_uuid=True),
            primary_key=True,
            default=uuid.uuid4,
            nullable=False
        )

def to_dict(instance, exclude: Optional[list] = None) -> Dict[str, Any]:
    """Convert model instance to dictionary"""
    exclude = exclude or []
    result = {}

    for column in instance.__table__.columns:
        if column.name in exclude:
            continue
        value = getattr(instance, column.key, None)
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, (uuid.UUID, Decimal)):
            value = str(value)
        elif isinstance(value, enum.Enum):
            value = value.value
        result[column.name] = value

    return result

__all__ = [
    'Base',
    'TimestampedModel',
    'CreatedAtModel',
    'UUIDModel',
    'to_dict',
]
