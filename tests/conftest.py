import os
import tempfile
from datetime import datetime, timedelta, timezone
from io import BytesIO

# Настройки должны быть заданы до импорта приложения
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_PATH", tempfile.mkdtemp(prefix="blog-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api.core.auth import auth_service
from blog_api.core.slug import slugify
from blog_api.db.database import get_db
from blog_api.db.models import ROLE_ADMIN, ROLE_USER, Base, Category, Post, User
from blog_api.main import app
from blog_api.services.storage_service import LocalStorageProvider, get_storage_service

PASSWORD = "password123"
# Один хеш на всю сессию: bcrypt медленный
PASSWORD_HASH = auth_service.get_password_hash(PASSWORD)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def png_image() -> bytes:
    """Минимальный валидный PNG."""
    buf = BytesIO()
    Image.new("RGB", (4, 4), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """Сессия для подготовки данных и проверок в тестах."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(str(tmp_path / "uploads"))


@pytest.fixture
def client(session_factory, storage):
    """Тестовый клиент с подмененными БД и хранилищем."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# Фабрики


@pytest.fixture
def make_user(db):
    def _make_user(username: str, role: str = ROLE_USER) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=PASSWORD_HASH,
            role=role,
            avatar=f"{username}.png",
            bio=f"About {username}",
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_category(db):
    def _make_category(name: str, description: str = "") -> Category:
        category = Category(name=name, slug=slugify(name), description=description)
        db.add(category)
        db.commit()
        return category

    return _make_category


@pytest.fixture
def make_post(db):
    counter = {"n": 0}

    def _make_post(author: User, category: Category, title: str, **fields) -> Post:
        counter["n"] += 1
        fields.setdefault("content", f"Content of {title}")
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=counter["n"]))
        post = Post(
            title=title,
            slug=slugify(title),
            author_id=author.id,
            category_id=category.id,
            **fields,
        )
        db.add(post)
        db.commit()
        return post

    return _make_post


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = auth_service.create_access_token(data={"sub": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# Готовые объекты


@pytest.fixture
def author(make_user):
    return make_user("author")


@pytest.fixture
def reader(make_user):
    return make_user("reader")


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=ROLE_ADMIN)


@pytest.fixture
def category(make_category):
    return make_category("Tech & Science", "All things tech")


@pytest.fixture
def post(make_post, author, category):
    return make_post(author, category, "Hello World", tags=["intro"])
