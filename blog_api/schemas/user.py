"""
Схемы пользователей и аутентификации.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel


class RegisterIn(CamelModel):
    """Схема регистрации."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(CamelModel):
    """Схема для входа в систему."""

    username: str = Field(..., description="Username или email")
    password: str = Field(..., description="Пароль")


class UserOut(CamelModel):
    """Схема для вывода пользователя."""

    id: str
    username: str
    email: str
    role: str
    avatar: str
    bio: str = ""
    created_at: Optional[datetime] = None


class AuthOut(CamelModel):
    """Ответ при входе и регистрации."""

    token: str
    user: UserOut
