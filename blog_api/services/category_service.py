"""
Сервис категорий.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blog_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from blog_api.core.slug import slugify
from blog_api.db.models import Category, Post
from blog_api.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from blog_api.services.base import commit_or_conflict
from blog_api.services.projections import category_out

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Category with this name already exists"
CATEGORY_IN_USE = "Cannot delete category with existing posts"


def list_categories(db: Session) -> List[CategoryOut]:
    """Все категории, отсортированные по названию."""
    rows = db.scalars(select(Category).order_by(Category.name)).all()
    return [category_out(c) for c in rows]


def _get_or_404(db: Session, category_id: str) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def get_category(db: Session, category_id: str) -> CategoryOut:
    return category_out(_get_or_404(db, category_id))


def create_category(db: Session, data: CategoryCreate) -> CategoryOut:
    """
    Создать категорию.

    Raises:
        ValidationError: Не указано название
        ConflictError: Название или slug уже заняты
    """
    if not data.name:
        raise ValidationError("Category name is required")

    category = Category(
        name=data.name,
        slug=slugify(data.name),
        description=data.description or "",
    )
    db.add(category)
    commit_or_conflict(db, DUPLICATE_NAME)

    logger.info(f"Category created: {category.id} - {category.name}")
    return category_out(category)


def update_category(db: Session, category_id: str, data: CategoryUpdate) -> CategoryOut:
    """
    Частично обновить категорию; новое название пересчитывает slug.

    Raises:
        NotFoundError: Если категории нет
        ValidationError: Пустое название
        ConflictError: Название или slug уже заняты
    """
    category = _get_or_404(db, category_id)
    changes = data.model_dump(exclude_unset=True)

    if "name" in changes:
        if not changes["name"]:
            raise ValidationError("Category name is required")
        category.name = changes["name"]
        category.slug = slugify(changes["name"])
    if "description" in changes:
        category.description = changes["description"] or ""

    commit_or_conflict(db, DUPLICATE_NAME)

    logger.info(f"Category updated: {category.id} - {category.name}")
    return category_out(category)


def _count_posts(db: Session, category_id: str) -> int:
    return db.scalar(
        select(func.count()).select_from(Post).where(Post.category_id == category_id)
    ) or 0


def delete_category(db: Session, category_id: str) -> None:
    """
    Удалить категорию, если на нее не ссылается ни один пост.

    Пост, добавленный между проверкой и фиксацией, ловит внешний ключ
    (RESTRICT); это тоже ConflictError.

    Raises:
        NotFoundError: Если категории нет
        ConflictError: У категории есть посты
    """
    category = _get_or_404(db, category_id)

    posts_count = _count_posts(db, category.id)
    if posts_count:
        logger.warning(f"Refused to delete category {category.id}: {posts_count} posts")
        raise ConflictError(CATEGORY_IN_USE)

    name = category.name
    db.delete(category)
    commit_or_conflict(db, CATEGORY_IN_USE)
    logger.warning(f"Category deleted: {category_id} - {name}")
