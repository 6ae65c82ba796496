"""
Общие помощники сервисного слоя.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_api.core.exceptions import ConflictError, ForbiddenError
from blog_api.db.models import ROLE_ADMIN

logger = logging.getLogger(__name__)


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Зафиксировать транзакцию.

    Нарушение ограничения целостности (уникальность, внешний ключ)
    откатывает транзакцию и превращается в ConflictError
    с понятным сообщением.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"{message}: {exc.orig}")
        raise ConflictError(message) from exc


def ensure_owner_or_admin(
    owner_id: str, caller_id: str, caller_role: str, action: str
) -> None:
    """Изменять пост может только его автор или администратор."""
    if owner_id != caller_id and caller_role != ROLE_ADMIN:
        raise ForbiddenError(f"Not authorized to {action} this post")
