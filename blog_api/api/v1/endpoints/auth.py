"""
API endpoints аутентификации.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blog_api.core.auth import get_current_user
from blog_api.db.database import get_db
from blog_api.db.models import User
from blog_api.schemas.common import Envelope
from blog_api.schemas.user import AuthOut, LoginIn, RegisterIn, UserOut
from blog_api.services import user_service

router = APIRouter()


@router.post("/register", response_model=Envelope[AuthOut], status_code=201)
def register(data: RegisterIn, db: Session = Depends(get_db)):
    """Регистрация нового пользователя; возвращает токен и профиль."""
    return {"success": True, "data": user_service.register(db, data)}


@router.post("/login", response_model=Envelope[AuthOut])
def login(data: LoginIn, db: Session = Depends(get_db)):
    """
    Вход по username или email.

    Raises:
        AuthenticationError: При неверных учетных данных (401)
    """
    return {"success": True, "data": user_service.login(db, data)}


@router.get("/me", response_model=Envelope[UserOut])
def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": user_service.user_out(current_user)}
