"""
Схемы категорий.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class CategoryCreate(CamelModel):
    """Схема для создания категории."""

    name: Optional[str] = Field(None, max_length=50, description="Название категории")
    description: Optional[str] = Field(None, description="Описание")


class CategoryUpdate(CamelModel):
    """Схема для частичного обновления категории."""

    name: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class CategorySummary(CamelModel):
    """Проекция категории внутри поста."""

    id: str
    name: str
    slug: str


class CategoryOut(CategorySummary):
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
