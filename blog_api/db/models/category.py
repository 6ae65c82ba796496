"""
Модель категории постов.
"""

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow


class Category(Base):
    """
    Модель категории постов.

    Attributes:
        id: Уникальный идентификатор категории
        name: Уникальное название (до 50 символов)
        slug: URL-friendly название, производное от name
        description: Описание категории
        posts: Посты в этой категории
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Без каскада: категорию с постами удалить нельзя
    posts: Mapped[List["Post"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', slug='{self.slug}')>"
