"""HTTP клиент Blog API."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from blog_api.schemas.category import CategoryOut
from blog_api.schemas.common import PageMeta
from blog_api.schemas.post import PostDetail, PostListItem
from blog_api.schemas.user import AuthOut, UserOut

logger = logging.getLogger(__name__)

# (имя файла, содержимое, content type)
ImageUpload = Tuple[str, bytes, str]


class ApiError(Exception):
    """Неуспешный ответ API или ошибка транспорта."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(message or "Something went wrong")
        self.status_code = status_code
        self.message = message


class BlogApiClient:
    """Типизированная обертка над эндпоинтами Blog API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=timeout)
        self.token: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self.http.request(
                method, f"{self.base_url}{path}", headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc) or None) from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        if response.is_error or not body.get("success", False):
            raise ApiError(response.status_code, body.get("error"))
        return body

    @staticmethod
    def _form_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Поля multipart формы: только строки."""
        form: Dict[str, Any] = {}
        for key, value in fields.items():
            if value is None:
                continue
            if isinstance(value, bool):
                form[key] = "true" if value else "false"
            elif isinstance(value, (list, tuple)):
                # повторяющиеся поля; одиночное сервер читает как теги через запятую
                form[key] = [str(item) for item in value]
            else:
                form[key] = str(value)
        return form

    def _post_body(self, fields: Dict[str, Any], image: Optional[ImageUpload]) -> Dict[str, Any]:
        if image is None:
            return {"json": fields}
        return {"data": self._form_fields(fields), "files": {"featuredImage": image}}

    # Посты

    def get_posts(
        self, page: int = 1, limit: int = 10, category: str = "", search: str = ""
    ) -> Tuple[List[PostListItem], PageMeta]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        body = self._request("GET", "/posts", params=params)
        posts = [PostListItem.model_validate(p) for p in body.get("data", [])]
        return posts, PageMeta.model_validate(body["pagination"])

    def get_post(self, post_id: str) -> PostDetail:
        body = self._request("GET", f"/posts/{post_id}")
        return PostDetail.model_validate(body["data"])

    def create_post(self, fields: Dict[str, Any], image: Optional[ImageUpload] = None) -> PostDetail:
        body = self._request("POST", "/posts", **self._post_body(fields, image))
        return PostDetail.model_validate(body["data"])

    def update_post(
        self, post_id: str, fields: Dict[str, Any], image: Optional[ImageUpload] = None
    ) -> PostDetail:
        body = self._request("PUT", f"/posts/{post_id}", **self._post_body(fields, image))
        return PostDetail.model_validate(body["data"])

    def delete_post(self, post_id: str) -> None:
        self._request("DELETE", f"/posts/{post_id}")

    def add_comment(self, post_id: str, content: str) -> PostDetail:
        body = self._request("POST", f"/posts/{post_id}/comments", json={"content": content})
        return PostDetail.model_validate(body["data"])

    # Категории

    def get_categories(self) -> List[CategoryOut]:
        body = self._request("GET", "/categories")
        return [CategoryOut.model_validate(c) for c in body.get("data", [])]

    def get_category(self, category_id: str) -> CategoryOut:
        body = self._request("GET", f"/categories/{category_id}")
        return CategoryOut.model_validate(body["data"])

    def create_category(self, name: str, description: Optional[str] = None) -> CategoryOut:
        payload = {"name": name, "description": description}
        body = self._request("POST", "/categories", json=payload)
        return CategoryOut.model_validate(body["data"])

    def update_category(self, category_id: str, fields: Dict[str, Any]) -> CategoryOut:
        body = self._request("PUT", f"/categories/{category_id}", json=fields)
        return CategoryOut.model_validate(body["data"])

    def delete_category(self, category_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}")

    # Аутентификация

    def login(self, username: str, password: str) -> AuthOut:
        body = self._request("POST", "/auth/login", json={"username": username, "password": password})
        return AuthOut.model_validate(body["data"])

    def register(self, username: str, email: str, password: str) -> AuthOut:
        payload = {"username": username, "email": email, "password": password}
        body = self._request("POST", "/auth/register", json=payload)
        return AuthOut.model_validate(body["data"])

    def me(self) -> UserOut:
        body = self._request("GET", "/auth/me")
        return UserOut.model_validate(body["data"])

    def close(self) -> None:
        self.http.close()
