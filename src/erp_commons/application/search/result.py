"""Application search – PageResult generic container."""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, TypeVar

from erp_commons.application.search.query import SearchRequest

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["PageResult"]


@dataclass
class PageResult(Generic[T]):
    """One page of an ordered result set plus the size of the whole filtered set."""

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20

    @classmethod
    def empty(cls, request: SearchRequest, total_count: int = 0) -> PageResult[T]:
        return cls(items=[], total_count=total_count, page=request.page, page_size=request.page_size)

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0 or self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def map(self, fn: Callable[[T], U]) -> PageResult[U]:
        """Return a new page with each item transformed by *fn*."""
        return PageResult(
            items=[fn(item) for item in self.items],
            total_count=self.total_count,
            page=self.page,
            page_size=self.page_size,
        )

    def select_fields(self, fields: Iterable[str]) -> PageResult[dict[str, Any]]:
        """Project dataclass items onto *fields* (sparse fieldsets).

        Names are compared case-insensitively and without underscores, so
        ``isActive`` selects ``is_active``. An empty selection keeps every field.
        """
        wanted = {_fold(name) for name in fields}

        def project(item: Any) -> dict[str, Any]:
            data = {f.name: getattr(item, f.name) for f in dataclasses.fields(item)}
            if not wanted:
                return data
            return {name: value for name, value in data.items() if _fold(name) in wanted}

        return self.map(project)


def _fold(name: str) -> str:
    return name.replace("_", "").lower()
