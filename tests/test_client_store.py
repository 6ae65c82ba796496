"""
Тесты клиентского хранилища и HTTP клиента на работающем приложении.
"""

import httpx
import pytest

from blog_api.client import ApiError, AppStore, BlogApiClient


@pytest.fixture
def api(client):
    return BlogApiClient(base_url="http://testserver/api", http=client)


@pytest.fixture
def store(api):
    return AppStore(api, page_size=2)


def test_client_raises_api_error_with_message(api):
    with pytest.raises(ApiError) as exc_info:
        api.get_post("missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Post not found"


def test_client_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    api = BlogApiClient(http=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(ApiError) as exc_info:
        api.get_categories()

    assert exc_info.value.status_code == 0


def test_load_posts_fills_state(store, make_post, author, category):
    for i in range(3):
        make_post(author, category, f"Post {i}")

    store.load_posts(page=1)

    state = store.state
    assert [p.title for p in state.posts] == ["Post 2", "Post 1"]
    assert (state.pagination.total, state.pagination.pages) == (3, 2)
    assert state.loading is False
    assert state.error is None


def test_load_categories(store, category):
    store.load_categories()
    assert [c.slug for c in store.state.categories] == ["tech-science"]


def test_load_missing_post_sets_error(store):
    store.load_post("missing")

    assert store.state.error == "Post not found"
    assert store.state.loading is False
    assert store.state.current_post is None


def test_clear_error(store):
    store.load_post("missing")
    store.clear_error()
    assert store.state.error is None


def test_login_and_create_post(store, author, category):
    assert store.login("author", "password123") is True
    assert store.state.user.username == "author"

    created = store.create_post(
        {"title": "From the store", "content": "Body", "category": category.id, "tags": ["a"]}
    )

    assert created is not None
    assert store.state.posts[0].id == created.id


def test_create_post_with_image(store, author, category, png_image):
    store.login("author", "password123")

    created = store.create_post(
        {
            "title": "With image",
            "content": "Body",
            "category": category.id,
            "isPublished": True,
            "tags": ["C, C++", "go"],
        },
        image=("cover.png", png_image, "image/png"),
    )

    assert created.featured_image.startswith("featured-")
    assert created.tags == ["C, C++", "go"]


def test_failed_login_sets_error(store, author):
    assert store.login("author", "wrong") is False
    assert store.state.error == "Invalid credentials"
    assert store.state.user is None


def test_create_post_unauthenticated_sets_error(store, category):
    result = store.create_post({"title": "T", "content": "C", "category": category.id})

    assert result is None
    assert store.state.error == "Not authorized to access this route"


def test_post_lifecycle(store, author, category):
    store.register("writer", "writer@example.com", "secret1")
    created = store.create_post({"title": "Lifecycle", "content": "Body", "category": category.id})

    store.load_post(created.id)
    assert store.state.current_post.view_count == 1

    updated = store.update_post(created.id, {"title": "Lifecycle Renamed"})
    assert store.state.current_post.slug == updated.slug == "lifecycle-renamed"

    store.add_comment(created.id, "Nice")
    assert [c.content for c in store.state.current_post.comments] == ["Nice"]

    assert store.delete_post(created.id) is True
    assert store.state.current_post is None
    assert all(p.id != created.id for p in store.state.posts)


def test_forbidden_update_sets_error(store, post, reader):
    store.login("reader", "password123")

    assert store.update_post(post.id, {"title": "Hijacked"}) is None
    assert store.state.error == "Not authorized to update this post"


def test_logout_clears_token(store, author):
    store.login("author", "password123")
    store.logout()

    assert store.client.token is None
    assert store.state.user is None


def test_subscribe_and_unsubscribe(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.clear_error()
    unsubscribe()
    store.clear_error()

    assert len(seen) == 1
