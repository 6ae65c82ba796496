"""
Схемы постов и комментариев.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .category import CategorySummary
from .common import CamelModel


def normalize_tags(value: Any) -> Optional[List[str]]:
    """
    Привести теги к упорядоченному множеству строк.

    Принимает список или строку через запятую. Запятая разделяет теги
    только в строке; элементы списка сохраняются как есть. Теги
    обрезаются, пустые отбрасываются, повторы удаляются с сохранением
    первого.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ValueError("Tags must be a list or a comma separated string")

    tags: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Tags must be strings")
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


# ==================== ВХОДНЫЕ СХЕМЫ ====================


class PostCreate(CamelModel):
    """
    Схема для создания поста.

    Обязательность title/content/category проверяет сервисный слой,
    здесь только форматы и длины.
    """

    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = None
    category: Optional[str] = Field(None, description="ID категории")
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Optional[List[str]]:
        return normalize_tags(value)


class PostUpdate(PostCreate):
    """Схема для частичного обновления поста: переданные поля перезаписываются."""


class CommentCreate(CamelModel):
    content: Optional[str] = Field(None, max_length=500)


# ==================== ПРОЕКЦИИ ====================


class AuthorSummary(CamelModel):
    """Автор в списках и комментариях."""

    id: str
    username: str
    avatar: str


class AuthorDetail(AuthorSummary):
    """Автор на странице поста."""

    bio: str = ""


class CommentOut(CamelModel):
    id: int
    user: AuthorSummary
    content: str
    created_at: datetime


class PostBase(CamelModel):
    id: str
    title: str
    slug: str
    content: str
    excerpt: str = ""
    tags: List[str] = []
    is_published: bool = True
    featured_image: str
    view_count: int = 0
    created_at: datetime
    updated_at: datetime


class PostListItem(PostBase):
    """Пост в списке: без тел комментариев."""

    author: AuthorSummary
    category: CategorySummary
    comment_count: int = 0
    display_excerpt: str = ""


class PostDetail(PostBase):
    """Пост целиком: автор с bio и раскрытые комментарии."""

    author: AuthorDetail
    category: CategorySummary
    comments: List[CommentOut] = []
