"""
Состояние клиента: типизированные действия и чистый редьюсер.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

from blog_api.schemas.category import CategoryOut
from blog_api.schemas.common import PageMeta
from blog_api.schemas.post import CommentOut, PostDetail, PostListItem
from blog_api.schemas.user import UserOut

PostItem = Union[PostListItem, PostDetail]


def _empty_pagination() -> PageMeta:
    return PageMeta(page=1, limit=10, total=0, pages=0)


@dataclass(frozen=True)
class AppState:
    user: Optional[UserOut] = None
    token: Optional[str] = None
    posts: Tuple[PostItem, ...] = ()
    categories: Tuple[CategoryOut, ...] = ()
    current_post: Optional[PostDetail] = None
    loading: bool = False
    error: Optional[str] = None
    pagination: PageMeta = field(default_factory=_empty_pagination)


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class SetError:
    error: Optional[str]


@dataclass(frozen=True)
class SetUser:
    user: UserOut
    token: Optional[str] = None


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class SetPosts:
    posts: Tuple[PostItem, ...]
    pagination: PageMeta


@dataclass(frozen=True)
class SetCategories:
    categories: Tuple[CategoryOut, ...]


@dataclass(frozen=True)
class SetCurrentPost:
    post: Optional[PostDetail]


@dataclass(frozen=True)
class AddPost:
    post: PostItem


@dataclass(frozen=True)
class UpdatePost:
    post: PostDetail


@dataclass(frozen=True)
class DeletePost:
    post_id: str


@dataclass(frozen=True)
class AddComment:
    post_id: str
    comment: CommentOut


Action = Union[
    SetLoading,
    SetError,
    SetUser,
    Logout,
    SetPosts,
    SetCategories,
    SetCurrentPost,
    AddPost,
    UpdatePost,
    DeletePost,
    AddComment,
]


def reduce(state: AppState, action: Action) -> AppState:
    """Вернуть следующее состояние; ``state`` не изменяется."""
    if isinstance(action, SetLoading):
        return replace(state, loading=action.loading)

    if isinstance(action, SetError):
        return replace(state, error=action.error, loading=False)

    if isinstance(action, SetUser):
        return replace(state, user=action.user, token=action.token or state.token)

    if isinstance(action, Logout):
        return replace(state, user=None, token=None, posts=())

    if isinstance(action, SetPosts):
        return replace(
            state, posts=tuple(action.posts), pagination=action.pagination, loading=False
        )

    if isinstance(action, SetCategories):
        return replace(state, categories=tuple(action.categories))

    if isinstance(action, SetCurrentPost):
        return replace(state, current_post=action.post, loading=False)

    if isinstance(action, AddPost):
        return replace(state, posts=(action.post,) + state.posts)

    if isinstance(action, UpdatePost):
        updated = action.post
        current = state.current_post
        return replace(
            state,
            posts=tuple(updated if p.id == updated.id else p for p in state.posts),
            current_post=updated if current is not None and current.id == updated.id else current,
        )

    if isinstance(action, DeletePost):
        current = state.current_post
        return replace(
            state,
            posts=tuple(p for p in state.posts if p.id != action.post_id),
            current_post=None if current is not None and current.id == action.post_id else current,
        )

    if isinstance(action, AddComment):
        current = state.current_post
        if current is None or current.id != action.post_id:
            return state
        comments = list(current.comments) + [action.comment]
        return replace(state, current_post=current.model_copy(update={"comments": comments}))

    return state
