"""
Общие схемы ответов: конверт и метаданные пагинации.
"""

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Базовая схема: snake_case в Python, camelCase в JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageMeta(BaseModel):
    """
    Метаданные пагинации.

    Attributes:
        page: Номер текущей страницы (с 1)
        limit: Размер страницы
        total: Общее количество записей, подходящих под фильтр
        pages: Общее количество страниц
    """

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "PageMeta":
        """
        Создает экземпляр PageMeta с расчетом pages = ceil(total / limit).

        При total == 0 страниц ноль.
        """
        pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, pages=pages)


class Envelope(BaseModel, Generic[T]):
    """Единый конверт успешного ответа."""

    success: bool = True
    data: T


class PageEnvelope(BaseModel, Generic[T]):
    """Конверт ответа со списком и пагинацией."""

    success: bool = True
    data: List[T]
    pagination: PageMeta


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
