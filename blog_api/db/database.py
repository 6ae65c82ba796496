"""
Конфигурация базы данных.

Содержит настройки подключения к БД и фабрику сессий.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from blog_api.core.config import settings


def _connect_args(url: str) -> dict:
    # SQLite соединение используется из потоков пула FastAPI
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Создание движка SQLAlchemy
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Проверка соединения перед использованием
    future=True,
    echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
    connect_args=_connect_args(settings.DATABASE_URL),
)


# Фабрика сессий базы данных
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)


def get_db() -> Generator:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
