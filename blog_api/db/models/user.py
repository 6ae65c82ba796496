"""
Модель пользователя для системы аутентификации.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    """Модель пользователя."""

    __tablename__ = "users"

    # Основные поля
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Права доступа
    role: Mapped[str] = mapped_column(String(16), default=ROLE_USER, nullable=False)

    # Профиль
    avatar: Mapped[str] = mapped_column(
        String(255), default="default-avatar.jpg", nullable=False
    )
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint("role in ('user','admin')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
