"""
Сервис пользователей: регистрация и вход.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from blog_api.core.auth import auth_service
from blog_api.core.exceptions import AuthenticationError
from blog_api.db.models import ROLE_USER, User
from blog_api.schemas.user import AuthOut, LoginIn, RegisterIn, UserOut
from blog_api.services.base import commit_or_conflict

logger = logging.getLogger(__name__)


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        avatar=user.avatar,
        bio=user.bio or "",
        created_at=user.created_at,
    )


def _auth_response(user: User) -> AuthOut:
    token = auth_service.create_access_token(data={"sub": str(user.id)})
    return AuthOut(token=token, user=user_out(user))


def register(db: Session, data: RegisterIn) -> AuthOut:
    """
    Зарегистрировать пользователя с ролью user.

    Raises:
        ConflictError: username или email уже заняты
    """
    user = User(
        username=data.username,
        email=str(data.email).lower(),
        hashed_password=auth_service.get_password_hash(data.password),
        role=ROLE_USER,
    )
    db.add(user)
    commit_or_conflict(db, "User with this username or email already exists")

    logger.info(f"User registered: {user.id} - {user.username}")
    return _auth_response(user)


def login(db: Session, data: LoginIn) -> AuthOut:
    """
    Вход по username или email.

    Raises:
        AuthenticationError: При неверных учетных данных
    """
    user = db.scalar(
        select(User).where(
            or_(User.username == data.username, User.email == data.username.lower())
        )
    )
    if user is None or not auth_service.verify_password(data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {data.username}")
        raise AuthenticationError("Invalid credentials")

    logger.info(f"User logged in: {user.id} - {user.username}")
    return _auth_response(user)
