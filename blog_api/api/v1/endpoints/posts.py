"""
API endpoints для работы с постами.

Список с фильтрацией по категории, поиском и пагинацией,
CRUD операции над постами и добавление комментариев.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from blog_api.api.v1.payload import parse_schema, read_payload
from blog_api.core.auth import get_current_user
from blog_api.core.config import settings
from blog_api.db.database import get_db
from blog_api.db.models import User
from blog_api.schemas.common import Envelope, PageEnvelope
from blog_api.schemas.post import (
    CommentCreate,
    PostCreate,
    PostDetail,
    PostListItem,
    PostUpdate,
)
from blog_api.services import post_service
from blog_api.services.image_service import ImageService
from blog_api.services.storage_service import StorageProvider, get_storage_service

router = APIRouter()

FEATURED_IMAGE_FIELD = "featuredImage"


@router.get("", response_model=PageEnvelope[PostListItem])
def list_posts(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1, description="Номер страницы"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Размер страницы"
    ),
    category: Optional[str] = Query(None, description="Slug категории"),
    search: Optional[str] = Query(None, description="Поиск по заголовку и тексту"),
):
    """
    Получить список опубликованных постов.

    Поддерживает:
    - Фильтрацию по slug категории
    - Поиск подстроки в заголовке или тексте без учета регистра
    - Пагинацию, от новых к старым

    Returns:
        dict: {success, data: [Post], pagination: {page, limit, total, pages}}
    """
    items, meta = post_service.list_posts(
        db, page=page, limit=limit, category_slug=category, search=search
    )
    return {"success": True, "data": items, "pagination": meta}


@router.get("/{post_id}", response_model=Envelope[PostDetail])
def get_post(post_id: str, db: Session = Depends(get_db)):
    """
    Получить пост по ID и увеличить счетчик просмотров.

    Raises:
        NotFoundError: Если пост не найден (404)
    """
    return {"success": True, "data": post_service.get_post(db, post_id)}


@router.post("", response_model=Envelope[PostDetail], status_code=201)
async def create_post(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageProvider = Depends(get_storage_service),
):
    """
    Создать пост.

    Принимает JSON или multipart/form-data с файлом featuredImage.
    Автор берется из токена, а не из тела запроса.
    """
    payload, upload = await read_payload(request, file_field=FEATURED_IMAGE_FIELD)
    data = parse_schema(PostCreate, payload)

    images = ImageService(storage)
    stored_name = None
    if upload is not None:
        stored_name = images.store_featured_image(upload.filename, await upload.read())

    try:
        post = post_service.create_post(db, current_user.id, data, featured_image=stored_name)
    except Exception:
        images.discard(stored_name)
        raise

    return {"success": True, "data": post}


@router.put("/{post_id}", response_model=Envelope[PostDetail])
async def update_post(
    post_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageProvider = Depends(get_storage_service),
):
    """
    Частично обновить пост (автор или администратор).

    Raises:
        NotFoundError: 404
        ForbiddenError: 403
        ConflictError: 400 при совпадении заголовка
    """
    payload, upload = await read_payload(request, file_field=FEATURED_IMAGE_FIELD)
    data = parse_schema(PostUpdate, payload)

    images = ImageService(storage)
    stored_name = None
    if upload is not None:
        stored_name = images.store_featured_image(upload.filename, await upload.read())

    try:
        post = post_service.update_post(
            db,
            current_user.id,
            current_user.role,
            post_id,
            data,
            featured_image=stored_name,
            storage=storage,
        )
    except Exception:
        images.discard(stored_name)
        raise

    return {"success": True, "data": post}


@router.delete("/{post_id}", response_model=Envelope[dict])
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageProvider = Depends(get_storage_service),
):
    """Удалить пост вместе с комментариями (автор или администратор)."""
    post_service.delete_post(db, current_user.id, current_user.role, post_id, storage=storage)
    return {"success": True, "data": {}}


@router.post("/{post_id}/comments", response_model=Envelope[PostDetail], status_code=201)
async def add_comment(
    post_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Добавить комментарий.

    Returns:
        dict: Пост с раскрытыми комментариями, новый комментарий последний
    """
    payload, _ = await read_payload(request)
    data = parse_schema(CommentCreate, payload)
    post = post_service.add_comment(db, current_user.id, post_id, data.content)
    return {"success": True, "data": post}
