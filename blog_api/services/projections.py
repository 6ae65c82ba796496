"""
Проекции моделей в схемы ответов.

Каждая функция явно перечисляет, какие поля связанных сущностей
попадают в ответ, чтобы не отдавать их целиком.
"""

from blog_api.db.models import Category, Comment, Post, User
from blog_api.schemas.category import CategoryOut, CategorySummary
from blog_api.schemas.post import (
    AuthorDetail,
    AuthorSummary,
    CommentOut,
    PostDetail,
    PostListItem,
)

EXCERPT_PREVIEW_LENGTH = 150


def author_summary(user: User) -> AuthorSummary:
    return AuthorSummary(id=user.id, username=user.username, avatar=user.avatar)


def author_detail(user: User) -> AuthorDetail:
    return AuthorDetail(
        id=user.id, username=user.username, avatar=user.avatar, bio=user.bio or ""
    )


def category_summary(category: Category) -> CategorySummary:
    return CategorySummary(id=category.id, name=category.name, slug=category.slug)


def category_out(category: Category) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description or "",
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def comment_view(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        user=author_summary(comment.user),
        content=comment.content,
        created_at=comment.created_at,
    )


def _post_fields(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "content": post.content,
        "excerpt": post.excerpt or "",
        "tags": list(post.tags or []),
        "is_published": post.is_published,
        "featured_image": post.featured_image,
        "view_count": post.view_count,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def display_excerpt(post: Post) -> str:
    """Краткое описание или начало текста, если описания нет."""
    return post.excerpt or post.content[:EXCERPT_PREVIEW_LENGTH]


def post_list_item(post: Post, comment_count: int = 0) -> PostListItem:
    """
    Пост для списка.

    Автор: username, avatar. Категория: name, slug.
    Комментарии не раскрываются, только их количество.
    """
    return PostListItem(
        **_post_fields(post),
        author=author_summary(post.author),
        category=category_summary(post.category),
        comment_count=comment_count,
        display_excerpt=display_excerpt(post),
    )


def post_detail(post: Post) -> PostDetail:
    """
    Пост целиком.

    Автор: username, avatar, bio. Категория: name, slug.
    У каждого комментария раскрыт пользователь (username, avatar).
    """
    return PostDetail(
        **_post_fields(post),
        author=author_detail(post.author),
        category=category_summary(post.category),
        comments=[comment_view(c) for c in post.comments],
    )
