"""
Тесты сервисного слоя постов: выборки, счетчик просмотров, изменения.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from blog_api.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from blog_api.db.models import ROLE_ADMIN, ROLE_USER, Base, Category, Comment, Post, User
from blog_api.schemas.post import PostCreate, PostUpdate
from blog_api.services import post_service

# ==================== СПИСОК ====================


def test_list_skips_unpublished_posts(make_post, author, category, db):
    make_post(author, category, "Visible")
    make_post(author, category, "Draft", is_published=False)

    items, meta = post_service.list_posts(db)

    assert [p.title for p in items] == ["Visible"]
    assert meta.total == 1


def test_list_newest_first_with_pagination(make_post, author, category, db):
    for i in range(15):
        make_post(author, category, f"Post {i:02d}")

    first, meta = post_service.list_posts(db, page=1, limit=10)
    second, meta2 = post_service.list_posts(db, page=2, limit=10)

    assert [p.title for p in first] == [f"Post {i:02d}" for i in range(14, 4, -1)]
    assert [p.title for p in second] == [f"Post {i:02d}" for i in range(4, -1, -1)]
    assert (meta.page, meta.limit, meta.total, meta.pages) == (1, 10, 15, 2)
    assert (meta2.page, meta2.total, meta2.pages) == (2, 15, 2)


def test_list_page_past_the_end_is_empty(make_post, author, category, db):
    for i in range(3):
        make_post(author, category, f"Post {i}")

    items, meta = post_service.list_posts(db, page=5, limit=2)

    assert items == []
    assert meta.total == 3
    assert meta.pages == 2


def test_list_empty_database(db):
    items, meta = post_service.list_posts(db)
    assert items == []
    assert (meta.total, meta.pages) == (0, 0)


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, 5)])
def test_list_rejects_non_positive_paging(db, page, limit):
    with pytest.raises(ValidationError):
        post_service.list_posts(db, page=page, limit=limit)


def test_list_filters_by_category_slug(make_post, make_category, author, category, db):
    travel = make_category("Travel")
    make_post(author, category, "Gadgets")
    make_post(author, travel, "Lisbon")

    items, meta = post_service.list_posts(db, category_slug="travel")

    assert [p.title for p in items] == ["Lisbon"]
    assert items[0].category.slug == "travel"
    assert meta.total == 1


def test_list_unknown_category_slug_matches_nothing(make_post, author, category, db):
    make_post(author, category, "Gadgets")

    items, meta = post_service.list_posts(db, category_slug="no-such-category")

    assert items == []
    assert meta.total == 0


def test_list_search_is_case_insensitive_over_title_and_content(
    make_post, author, category, db
):
    make_post(author, category, "Learning Python")
    make_post(author, category, "Cooking", content="A recipe written by a python fan")
    make_post(author, category, "Gardening")

    items, meta = post_service.list_posts(db, search="PYTHON")

    assert {p.title for p in items} == {"Learning Python", "Cooking"}
    assert meta.total == 2


def test_list_search_treats_wildcards_literally(make_post, author, category, db):
    make_post(author, category, "100% Python")
    make_post(author, category, "Plain title")

    items, _ = post_service.list_posts(db, search="%")

    assert [p.title for p in items] == ["100% Python"]


def test_list_combines_category_and_search(make_post, make_category, author, category, db):
    travel = make_category("Travel")
    make_post(author, category, "Python tips")
    make_post(author, travel, "Python in Lisbon")

    items, _ = post_service.list_posts(db, category_slug="travel", search="python")

    assert [p.title for p in items] == ["Python in Lisbon"]


def test_list_item_projection(make_post, author, reader, category, db):
    post = make_post(author, category, "Projected", content="x" * 200)
    db.add_all([Comment(post_id=post.id, user_id=reader.id, content=f"c{i}") for i in range(3)])
    db.commit()

    [item] = post_service.list_posts(db)[0]

    assert item.author.username == "author"
    assert item.author.avatar == "author.png"
    assert item.category.name == "Tech & Science"
    assert item.comment_count == 3
    assert item.display_excerpt == "x" * 150
    assert item.featured_image == "default-post.jpg"


def test_list_item_prefers_explicit_excerpt(make_post, author, category, db):
    make_post(author, category, "With excerpt", excerpt="Short summary")

    [item] = post_service.list_posts(db)[0]

    assert item.display_excerpt == "Short summary"


# ==================== ПРОСМОТР ====================


def test_get_post_counts_view_and_keeps_updated_at(post, db):
    before = post.updated_at

    first = post_service.get_post(db, post.id)
    second = post_service.get_post(db, post.id)

    assert first.view_count == 1
    assert second.view_count == 2
    assert second.updated_at == first.updated_at
    assert second.updated_at.replace(tzinfo=None) == before.replace(tzinfo=None)


def test_get_post_returns_detail(post, reader, db):
    db.add(Comment(post_id=post.id, user_id=reader.id, content="Nice"))
    db.commit()

    detail = post_service.get_post(db, post.id)

    assert detail.author.bio == "About author"
    assert detail.category.slug == "tech-science"
    assert [c.content for c in detail.comments] == ["Nice"]
    assert detail.comments[0].user.username == "reader"


def test_get_post_unknown_id(db):
    with pytest.raises(NotFoundError):
        post_service.get_post(db, "missing")


def test_get_post_serves_unpublished_posts(make_post, author, category, db):
    draft = make_post(author, category, "Draft", is_published=False)

    assert post_service.get_post(db, draft.id).is_published is False


def test_concurrent_views_are_not_lost(tmp_path):
    """N параллельных просмотров увеличивают счетчик ровно на N."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'views.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    with Session() as session:
        user = User(username="u", email="u@example.com", hashed_password="x")
        cat = Category(name="General", slug="general")
        session.add_all([user, cat])
        session.flush()
        post = Post(title="Popular", slug="popular", content="c", author_id=user.id, category_id=cat.id)
        session.add(post)
        session.commit()
        post_id = post.id

    def view(_):
        with Session() as session:
            return post_service.get_post(session, post_id).view_count

    views = 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        counts = list(pool.map(view, range(views)))

    with Session() as session:
        assert session.get(Post, post_id).view_count == views
    assert max(counts) == views
    engine.dispose()


# ==================== СОЗДАНИЕ ====================


def test_create_post_derives_slug_and_defaults(author, category, db):
    data = PostCreate(title="Tech & Science News", content="Body", category=category.id)

    created = post_service.create_post(db, author.id, data)

    assert created.slug == "tech-science-news"
    assert created.author.id == author.id
    assert created.featured_image == "default-post.jpg"
    assert created.view_count == 0
    assert created.is_published is True
    assert created.tags == []
    assert created.comments == []


def test_create_post_normalizes_tags(author, category, db):
    data = PostCreate(
        title="Tagged", content="Body", category=category.id, tags=" a , b,,a , c "
    )

    created = post_service.create_post(db, author.id, data)

    assert created.tags == ["a", "b", "c"]


@pytest.mark.parametrize(
    "title, content, with_category",
    [
        (None, "Body", True),
        ("No body", None, True),
        ("No category", "Body", False),
        ("", "Body", True),
    ],
)
def test_create_post_requires_title_content_category(
    author, category, db, title, content, with_category
):
    data = PostCreate(
        title=title, content=content, category=category.id if with_category else None
    )

    with pytest.raises(ValidationError, match="Title, content, and category are required"):
        post_service.create_post(db, author.id, data)


def test_create_post_unknown_category(author, db):
    data = PostCreate(title="Orphan", content="Body", category="missing")

    with pytest.raises(ValidationError, match="Invalid category ID"):
        post_service.create_post(db, author.id, data)


def test_create_post_duplicate_title_keeps_first(post, author, category, db):
    data = PostCreate(title=post.title, content="Other body", category=category.id)

    with pytest.raises(ConflictError, match="Post with this title already exists"):
        post_service.create_post(db, author.id, data)

    db.expire_all()
    assert db.scalar(select(func.count()).select_from(Post)) == 1
    assert db.get(Post, post.id).content == "Content of Hello World"


def test_create_post_colliding_slug_is_conflict(post, author, category, db):
    # "Hello, World!" дает тот же slug, что и "Hello World"
    data = PostCreate(title="Hello, World!", content="Body", category=category.id)

    with pytest.raises(ConflictError):
        post_service.create_post(db, author.id, data)


# ==================== ОБНОВЛЕНИЕ ====================


def test_update_by_author_is_partial(post, author, db):
    updated = post_service.update_post(
        db, author.id, ROLE_USER, post.id, PostUpdate(content="New body")
    )

    assert updated.content == "New body"
    assert updated.title == "Hello World"
    assert updated.tags == ["intro"]


def test_update_title_rederives_slug(post, author, db):
    updated = post_service.update_post(
        db, author.id, ROLE_USER, post.id, PostUpdate(title="Brand New Title")
    )

    assert updated.slug == "brand-new-title"


def test_update_by_stranger_is_forbidden_and_changes_nothing(post, reader, db):
    with pytest.raises(ForbiddenError, match="Not authorized to update this post"):
        post_service.update_post(
            db, reader.id, ROLE_USER, post.id, PostUpdate(title="Hijacked")
        )

    db.expire_all()
    assert db.get(Post, post.id).title == "Hello World"


def test_update_by_admin_keeps_author(post, author, admin, db):
    updated = post_service.update_post(
        db, admin.id, ROLE_ADMIN, post.id, PostUpdate(is_published=False)
    )

    assert updated.is_published is False
    assert updated.author.id == author.id


def test_update_rejects_empty_required_fields(post, author, db):
    with pytest.raises(ValidationError, match="Title cannot be empty"):
        post_service.update_post(db, author.id, ROLE_USER, post.id, PostUpdate(title=""))


def test_update_to_existing_title_is_conflict(make_post, post, author, category, db):
    other = make_post(author, category, "Second")

    with pytest.raises(ConflictError):
        post_service.update_post(
            db, author.id, ROLE_USER, other.id, PostUpdate(title="Hello World")
        )

    db.expire_all()
    assert db.get(Post, other.id).title == "Second"


def test_update_missing_post(author, db):
    with pytest.raises(NotFoundError):
        post_service.update_post(db, author.id, ROLE_USER, "missing", PostUpdate(title="x"))


def test_update_replaces_image_and_removes_previous_file(post, author, storage, db):
    post.featured_image = "featured-old.png"
    db.commit()
    (storage.base_path / "featured-old.png").write_bytes(b"old")

    updated = post_service.update_post(
        db,
        author.id,
        ROLE_USER,
        post.id,
        PostUpdate(),
        featured_image="featured-new.png",
        storage=storage,
    )

    assert updated.featured_image == "featured-new.png"
    assert not storage.file_exists("featured-old.png")


# ==================== УДАЛЕНИЕ ====================


def test_delete_removes_post_and_comments(post, author, reader, db):
    post_id = post.id
    db.add(Comment(post_id=post_id, user_id=reader.id, content="bye"))
    db.commit()

    post_service.delete_post(db, author.id, ROLE_USER, post_id)

    db.expire_all()
    assert db.get(Post, post_id) is None
    assert db.scalar(select(func.count()).select_from(Comment)) == 0


def test_delete_by_stranger_is_forbidden(post, reader, db):
    with pytest.raises(ForbiddenError, match="Not authorized to delete this post"):
        post_service.delete_post(db, reader.id, ROLE_USER, post.id)

    db.expire_all()
    assert db.get(Post, post.id) is not None


def test_delete_by_admin(post, admin, db):
    post_id = post.id
    post_service.delete_post(db, admin.id, ROLE_ADMIN, post_id)

    db.expire_all()
    assert db.get(Post, post_id) is None


def test_delete_missing_post(author, db):
    with pytest.raises(NotFoundError):
        post_service.delete_post(db, author.id, ROLE_USER, "missing")


# ==================== КОММЕНТАРИИ ====================


def test_add_comment_appends_in_order(post, reader, author, db):
    post_service.add_comment(db, reader.id, post.id, "First")
    detail = post_service.add_comment(db, author.id, post.id, "Second")

    assert [c.content for c in detail.comments] == ["First", "Second"]
    assert detail.comments[-1].user.username == "author"


@pytest.mark.parametrize("content", [None, ""])
def test_add_comment_requires_content(post, reader, db, content):
    with pytest.raises(ValidationError, match="Please provide comment content"):
        post_service.add_comment(db, reader.id, post.id, content)


def test_add_comment_length_limit(post, reader, db):
    post_service.add_comment(db, reader.id, post.id, "x" * 500)

    with pytest.raises(ValidationError):
        post_service.add_comment(db, reader.id, post.id, "x" * 501)


def test_add_comment_to_missing_post(reader, db):
    with pytest.raises(NotFoundError):
        post_service.add_comment(db, reader.id, "missing", "Hello")


def test_create_post_keeps_commas_inside_list_tags(author, category, db):
    data = PostCreate(
        title="Languages", content="Body", category=category.id, tags=["C, C++", " go ", "go", ""]
    )

    created = post_service.create_post(db, author.id, data)

    assert created.tags == ["C, C++", "go"]
