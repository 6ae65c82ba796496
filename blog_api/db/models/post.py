"""
Модели поста и комментария.
"""

from datetime import datetime
from typing import List

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow


class Post(Base):
    """
    Модель поста.

    Attributes:
        id: Уникальный идентификатор поста
        title: Уникальный заголовок (до 100 символов)
        slug: Производное от title, тоже уникально
        content: Текст поста
        excerpt: Краткое описание
        category_id: ID категории
        author_id: ID автора, не меняется после создания
        tags: Упорядоченный список тегов
        is_published: Опубликован ли пост
        featured_image: Имя загруженного файла или изображение по умолчанию
        view_count: Счетчик просмотров, только растет
        comments: Комментарии в порядке добавления
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, default="", nullable=False)

    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), index=True, nullable=False
    )

    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=True, index=True, nullable=False
    )
    featured_image: Mapped[str] = mapped_column(
        String(255), default="default-post.jpg", nullable=False
    )
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Временные метки
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Связи с другими моделями
    category: Mapped["Category"] = relationship(back_populates="posts")
    author: Mapped["User"] = relationship()
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all,delete-orphan",
        order_by="Comment.id",
    )

    def __repr__(self) -> str:
        return f"<Post(id='{self.id}', title='{self.title}')>"


class Comment(Base):
    """
    Комментарий к посту.

    Порядок комментариев задается автоинкрементным id.
    Редактирования и удаления отдельного комментария нет.
    """

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    content: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    post: Mapped[Post] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship()
