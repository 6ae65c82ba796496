from .category import CategoryCreate, CategoryOut, CategorySummary, CategoryUpdate
from .common import Envelope, ErrorEnvelope, PageEnvelope, PageMeta
from .post import (
    AuthorDetail,
    AuthorSummary,
    CommentCreate,
    CommentOut,
    PostCreate,
    PostDetail,
    PostListItem,
    PostUpdate,
)
from .user import AuthOut, LoginIn, RegisterIn, UserOut

__all__ = [
    "AuthOut",
    "AuthorDetail",
    "AuthorSummary",
    "CategoryCreate",
    "CategoryOut",
    "CategorySummary",
    "CategoryUpdate",
    "CommentCreate",
    "CommentOut",
    "Envelope",
    "ErrorEnvelope",
    "LoginIn",
    "PageEnvelope",
    "PageMeta",
    "PostCreate",
    "PostDetail",
    "PostListItem",
    "PostUpdate",
    "RegisterIn",
    "UserOut",
]
