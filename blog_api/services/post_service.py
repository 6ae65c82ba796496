"""
Сервис постов: выборки с фильтрацией и пагинацией, создание,
обновление, удаление, комментарии и счетчик просмотров.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, desc, false, func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from blog_api.core.config import settings
from blog_api.core.exceptions import NotFoundError, ValidationError
from blog_api.core.slug import slugify
from blog_api.db.models import Category, Comment, Post
from blog_api.schemas.common import PageMeta
from blog_api.schemas.post import PostCreate, PostDetail, PostListItem, PostUpdate
from blog_api.services.base import commit_or_conflict, ensure_owner_or_admin
from blog_api.services.projections import post_detail, post_list_item
from blog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

DUPLICATE_TITLE = "Post with this title already exists"
COMMENT_MAX_LENGTH = 500


# ==================== ВЫБОРКИ ====================


def _listing_conditions(
    db: Session, category_slug: Optional[str], search: Optional[str]
) -> list:
    """
    Условия WHERE для списка постов.

    Неизвестный slug категории делает фильтр невыполнимым,
    поиск ищет подстроку без учета регистра в заголовке или тексте.
    """
    conditions = [Post.is_published == True]

    if category_slug:
        category_id = db.scalar(select(Category.id).where(Category.slug == category_slug))
        if category_id is None:
            conditions.append(false())
        else:
            conditions.append(Post.category_id == category_id)

    if search:
        conditions.append(
            or_(
                Post.title.icontains(search, autoescape=True),
                Post.content.icontains(search, autoescape=True),
            )
        )

    return conditions


def _comment_counts(db: Session, post_ids: List[str]) -> Dict[str, int]:
    if not post_ids:
        return {}
    rows = db.execute(
        select(Comment.post_id, func.count(Comment.id))
        .where(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
    ).all()
    return {post_id: int(count) for post_id, count in rows}


def list_posts(
    db: Session,
    page: int = 1,
    limit: int = 10,
    category_slug: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[PostListItem], PageMeta]:
    """
    Получить страницу опубликованных постов.

    Args:
        db: Сессия базы данных
        page: Номер страницы (начиная с 1)
        limit: Размер страницы
        category_slug: Фильтр по slug категории
        search: Поисковая строка по заголовку и тексту

    Returns:
        Tuple[List[PostListItem], PageMeta]: Посты от новых к старым и
        метаданные пагинации; total считается без учета окна страницы

    Raises:
        ValidationError: При page < 1 или limit < 1
    """
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be positive integers")

    where_clause = and_(*_listing_conditions(db, category_slug, search))

    # Подсчет общего количества (отдельно, без ORDER/LIMIT)
    total = db.scalar(select(func.count()).select_from(Post).where(where_clause)) or 0

    stmt = (
        select(Post)
        .where(where_clause)
        .options(selectinload(Post.author), selectinload(Post.category))
        .order_by(desc(Post.created_at))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    posts = db.scalars(stmt).all()

    counts = _comment_counts(db, [p.id for p in posts])
    items = [post_list_item(p, counts.get(p.id, 0)) for p in posts]

    logger.info(f"Posts listed. Total: {total}, Page: {page}")
    return items, PageMeta.create(page=page, limit=limit, total=total)


def _load_post(db: Session, post_id: str) -> Optional[Post]:
    """Пост со всеми связями, нужными для post_detail."""
    stmt = (
        select(Post)
        .where(Post.id == post_id)
        .options(
            selectinload(Post.author),
            selectinload(Post.category),
            selectinload(Post.comments).selectinload(Comment.user),
        )
        .execution_options(populate_existing=True)
    )
    return db.scalar(stmt)


def get_post(db: Session, post_id: str) -> PostDetail:
    """
    Получить пост и засчитать просмотр.

    Счетчик увеличивается одним UPDATE на стороне БД,
    поэтому параллельные просмотры не теряются.

    Raises:
        NotFoundError: Если поста нет
    """
    result = db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(view_count=Post.view_count + 1, updated_at=Post.updated_at)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Post not found")
    db.commit()

    post = _load_post(db, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    logger.info(f"Post viewed: {post.id} - {post.title}")
    return post_detail(post)


# ==================== ИЗМЕНЕНИЯ ====================


def _ensure_category(db: Session, category_id: str) -> None:
    if db.get(Category, category_id) is None:
        raise ValidationError("Invalid category ID")


def create_post(
    db: Session,
    author_id: str,
    data: PostCreate,
    featured_image: Optional[str] = None,
) -> PostDetail:
    """
    Создать пост от имени автора.

    Автор всегда берется из аутентифицированного пользователя.
    Slug выводится из заголовка.

    Raises:
        ValidationError: Нет заголовка, текста или категории
        ConflictError: Пост с таким заголовком (или slug) уже есть
    """
    if not data.title or not data.content or not data.category:
        raise ValidationError("Title, content, and category are required")
    _ensure_category(db, data.category)

    post = Post(
        title=data.title,
        slug=slugify(data.title),
        content=data.content,
        excerpt=data.excerpt or "",
        category_id=data.category,
        author_id=author_id,
        tags=data.tags or [],
        is_published=data.is_published if data.is_published is not None else True,
        featured_image=featured_image or settings.DEFAULT_FEATURED_IMAGE,
    )
    db.add(post)
    commit_or_conflict(db, DUPLICATE_TITLE)

    logger.info(f"Post created: {post.id} - {post.title}")
    return post_detail(_load_post(db, post.id))


def _validate_update(db: Session, changes: dict) -> None:
    for field in ("title", "content", "category"):
        if field in changes and not changes[field]:
            raise ValidationError(f"{field.capitalize()} cannot be empty")
    if changes.get("category"):
        _ensure_category(db, changes["category"])


def update_post(
    db: Session,
    caller_id: str,
    caller_role: str,
    post_id: str,
    data: PostUpdate,
    featured_image: Optional[str] = None,
    storage: Optional[StorageProvider] = None,
) -> PostDetail:
    """
    Частично обновить пост.

    Переданные поля перезаписываются, остальные сохраняются.
    Новый заголовок пересчитывает slug. Автор не меняется.
    Если загружено новое изображение, старое удаляется из хранилища.

    Raises:
        NotFoundError: Если поста нет
        ForbiddenError: Если вызывающий не автор и не администратор
        ValidationError: Пустые title/content/category или неизвестная категория
        ConflictError: Заголовок совпадает с другим постом
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    ensure_owner_or_admin(post.author_id, caller_id, caller_role, "update")

    changes = data.model_dump(exclude_unset=True)
    _validate_update(db, changes)

    if "title" in changes:
        post.title = changes["title"]
        post.slug = slugify(changes["title"])
    if "content" in changes:
        post.content = changes["content"]
    if "category" in changes:
        post.category_id = changes["category"]
    if "excerpt" in changes:
        post.excerpt = changes["excerpt"] or ""
    if "tags" in changes:
        post.tags = changes["tags"] or []
    if changes.get("is_published") is not None:
        post.is_published = changes["is_published"]

    previous_image = None
    if featured_image:
        previous_image = post.featured_image
        post.featured_image = featured_image

    commit_or_conflict(db, DUPLICATE_TITLE)
    logger.info(f"Post updated: {post.id} - {post.title}")

    if storage is not None and previous_image and previous_image != settings.DEFAULT_FEATURED_IMAGE:
        storage.delete_file(previous_image)

    return post_detail(_load_post(db, post.id))


def delete_post(
    db: Session,
    caller_id: str,
    caller_role: str,
    post_id: str,
    storage: Optional[StorageProvider] = None,
) -> None:
    """
    Удалить пост вместе с комментариями одной транзакцией.

    Raises:
        NotFoundError: Если поста нет
        ForbiddenError: Если вызывающий не автор и не администратор
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    ensure_owner_or_admin(post.author_id, caller_id, caller_role, "delete")

    title = post.title
    image = post.featured_image
    db.delete(post)
    db.commit()

    logger.warning(f"Post deleted: {post_id} - {title}")
    logger.warning(f"Deleted by user: {caller_id}")

    if storage is not None and image != settings.DEFAULT_FEATURED_IMAGE:
        storage.delete_file(image)


def add_comment(db: Session, caller_id: str, post_id: str, content: Optional[str]) -> PostDetail:
    """
    Добавить комментарий в конец списка комментариев поста.

    Returns:
        PostDetail: Пост с раскрытыми комментариями, новый комментарий последний

    Raises:
        ValidationError: Пустой или слишком длинный текст
        NotFoundError: Если поста нет
    """
    if not content:
        raise ValidationError("Please provide comment content")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment cannot be more than {COMMENT_MAX_LENGTH} characters")

    if db.scalar(select(Post.id).where(Post.id == post_id)) is None:
        raise NotFoundError("Post not found")

    db.add(Comment(post_id=post_id, user_id=caller_id, content=content))
    db.commit()

    logger.info(f"Comment added to post {post_id} by user {caller_id}")
    return post_detail(_load_post(db, post_id))
