"""Постраничная выдача и разобранные параметры списка."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from peewee import ModelSelect

from services.errors import BadRequestError

T = TypeVar("T")

FilterValue = str | list[str]


@dataclass
class ListQuery:
    """Параметры списка: страница, размер, сортировка и фильтры.

    ``limit=None`` означает размер страницы по умолчанию для конкретного
    списка (10 для менеджеров, 25 для заявок).
    """

    page: int = 1
    limit: int | None = None
    sort_by: list[tuple[str, str]] = field(default_factory=list)
    filter: dict[str, FilterValue] = field(default_factory=dict)

    def with_limit(self, limit: int) -> "ListQuery":
        return ListQuery(
            page=self.page,
            limit=limit,
            sort_by=list(self.sort_by),
            filter=dict(self.filter),
        )


@dataclass
class Page(Generic[T]):
    data: list[T]
    page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.limit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "page": self.page,
            "limit": self.limit,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
        }


def total_pages(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit) if limit else 0


def resolve_paging(page: int | None, limit: int | None, default_limit: int) -> tuple[int, int]:
    """Подставить значения по умолчанию и проверить границы."""
    page = 1 if page is None else page
    limit = default_limit if limit is None else limit
    if page < 1:
        raise BadRequestError("Page must be a positive integer")
    if limit < 1:
        raise BadRequestError("Limit must be a positive integer")
    return page, limit


def paginate(query: ModelSelect, page: int, limit: int, total_count: int) -> Page:
    """Выбрать страницу ``page`` размером ``limit`` из готового запроса."""
    offset = (page - 1) * limit
    rows = list(query.limit(limit).offset(offset))
    return Page(data=rows, page=page, limit=limit, total_count=total_count)
