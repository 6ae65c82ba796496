"""
Контейнер состояния клиента.

Хранит один AppState, применяет действия через чистый редьюсер
и обращается к API. Ошибка запроса попадает в поле error и не
пробрасывается дальше, поэтому неудачная загрузка страницы не ломает навигацию.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from blog_api.client.api_client import ApiError, BlogApiClient, ImageUpload
from blog_api.client.state import (
    Action,
    AddComment,
    AddPost,
    AppState,
    DeletePost,
    Logout,
    SetCategories,
    SetCurrentPost,
    SetError,
    SetLoading,
    SetPosts,
    SetUser,
    UpdatePost,
    reduce,
)
from blog_api.schemas.post import PostDetail

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class AppStore:
    """Хранилище состояния; один экземпляр на клиентскую сессию."""

    def __init__(
        self,
        client: BlogApiClient,
        state: Optional[AppState] = None,
        page_size: int = 10,
    ):
        self.client = client
        self.page_size = page_size
        self._state = state or AppState()
        self._listeners: List[Listener] = []
        if self._state.token:
            self.client.token = self._state.token

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Подписать слушателя; возвращает функцию отписки."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _fail(self, exc: ApiError, fallback: str) -> None:
        message = exc.message or fallback
        logger.error(f"{fallback}: {message} (status {exc.status_code})")
        self.dispatch(SetError(message))

    def clear_error(self) -> None:
        self.dispatch(SetError(None))

    # Навигация: данные всегда запрашиваются с сервера заново

    def load_posts(self, page: int = 1, category: str = "", search: str = "") -> None:
        self.dispatch(SetLoading(True))
        try:
            posts, pagination = self.client.get_posts(page, self.page_size, category, search)
        except ApiError as exc:
            self._fail(exc, "Failed to load posts")
            return
        logger.info(f"Posts loaded: {len(posts)} posts, page {page}")
        self.dispatch(SetPosts(tuple(posts), pagination))

    def load_categories(self) -> None:
        try:
            categories = self.client.get_categories()
        except ApiError as exc:
            self._fail(exc, "Failed to load categories")
            return
        self.dispatch(SetCategories(tuple(categories)))

    def load_post(self, post_id: str) -> None:
        self.dispatch(SetLoading(True))
        try:
            post = self.client.get_post(post_id)
        except ApiError as exc:
            self._fail(exc, "Failed to load post")
            return
        self.dispatch(SetCurrentPost(post))

    # Изменения: результат сервера или None при ошибке

    def create_post(
        self, fields: Dict[str, Any], image: Optional[ImageUpload] = None
    ) -> Optional[PostDetail]:
        try:
            post = self.client.create_post(fields, image)
        except ApiError as exc:
            self._fail(exc, "Failed to create post")
            return None
        logger.info(f"Post created: {post.title}")
        self.dispatch(AddPost(post))
        return post

    def update_post(
        self, post_id: str, fields: Dict[str, Any], image: Optional[ImageUpload] = None
    ) -> Optional[PostDetail]:
        try:
            post = self.client.update_post(post_id, fields, image)
        except ApiError as exc:
            self._fail(exc, "Failed to update post")
            return None
        self.dispatch(UpdatePost(post))
        return post

    def delete_post(self, post_id: str) -> bool:
        try:
            self.client.delete_post(post_id)
        except ApiError as exc:
            self._fail(exc, "Failed to delete post")
            return False
        self.dispatch(DeletePost(post_id))
        return True

    def add_comment(self, post_id: str, content: str) -> Optional[PostDetail]:
        try:
            post = self.client.add_comment(post_id, content)
        except ApiError as exc:
            self._fail(exc, "Failed to add comment")
            return None
        # комментарии только добавляются, новый последний
        self.dispatch(AddComment(post_id, post.comments[-1]))
        return post

    # Сессия

    def login(self, username: str, password: str) -> bool:
        try:
            auth = self.client.login(username, password)
        except ApiError as exc:
            self._fail(exc, "Login failed")
            return False
        self.client.token = auth.token
        self.dispatch(SetUser(auth.user, auth.token))
        return True

    def register(self, username: str, email: str, password: str) -> bool:
        try:
            auth = self.client.register(username, email, password)
        except ApiError as exc:
            self._fail(exc, "Registration failed")
            return False
        self.client.token = auth.token
        self.dispatch(SetUser(auth.user, auth.token))
        return True

    def logout(self) -> None:
        self.client.token = None
        self.dispatch(Logout())
