"""
API endpoints для работы с категориями.

Чтение доступно всем, изменение только администраторам.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blog_api.core.auth import require_admin
from blog_api.db.database import get_db
from blog_api.db.models import User
from blog_api.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from blog_api.schemas.common import Envelope
from blog_api.services import category_service

router = APIRouter()


@router.get("", response_model=Envelope[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    """
    Получить список всех категорий.

    Returns:
        dict: Категории, отсортированные по названию
    """
    return {"success": True, "data": category_service.list_categories(db)}


@router.get("/{category_id}", response_model=Envelope[CategoryOut])
def get_category(category_id: str, db: Session = Depends(get_db)):
    """
    Получить категорию по ID.

    Raises:
        NotFoundError: Если категория не найдена (404)
    """
    return {"success": True, "data": category_service.get_category(db, category_id)}


@router.post("", response_model=Envelope[CategoryOut], status_code=201)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Создать категорию; slug выводится из названия."""
    return {"success": True, "data": category_service.create_category(db, data)}


@router.put("/{category_id}", response_model=Envelope[CategoryOut])
def update_category(
    category_id: str,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"success": True, "data": category_service.update_category(db, category_id, data)}


@router.delete("/{category_id}", response_model=Envelope[dict])
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Удалить категорию.

    Raises:
        ConflictError: Если у категории есть посты (400)
    """
    category_service.delete_category(db, category_id)
    return {"success": True, "data": {}}
