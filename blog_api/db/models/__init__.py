"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .category import Category
from .post import Comment, Post
from .user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Base",
    "Category",
    "Post",
    "Comment",
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
]
