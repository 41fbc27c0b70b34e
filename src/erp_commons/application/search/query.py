"""Application search – normalized search request value objects.

A :class:`SearchRequest` is always held in canonical form: filter clauses
sorted by field then operator, projection fields and includes sorted and
de-duplicated, field and operator names lower-cased. Sort clauses keep their order because
it is the sort precedence. Two requests with the same intent therefore
compare equal and produce the same :meth:`SearchRequest.canonical` payload.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Container

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "OPERATORS",
    "FilterClause",
    "FilterOperator",
    "SearchRequest",
    "SortClause",
    "SortDirection",
]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class FilterOperator(enum.StrEnum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"
    IN = "in"


OPERATORS: frozenset[str] = frozenset(op.value for op in FilterOperator)


class SortDirection(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, order=True)
class FilterClause:
    """``field <operator> value``; the value stays a raw string until the builder coerces it."""

    field: str
    operator: str = FilterOperator.EQ.value
    value: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", self.field.strip().lower())
        object.__setattr__(self, "operator", str(self.operator).strip().lower())


@dataclass(frozen=True)
class SortClause:
    field: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", self.field.strip().lower())
        object.__setattr__(self, "direction", SortDirection(self.direction))

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


@dataclass(frozen=True)
class SearchRequest:
    """Canonical filter/sort/projection/paging request."""

    filters: tuple[FilterClause, ...] = ()
    sort: tuple[SortClause, ...] = ()
    fields: tuple[str, ...] = ()
    q: str | None = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    include: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(sorted(self.filters, key=lambda c: (c.field, c.operator, c.value))))
        object.__setattr__(self, "sort", _first_per_field(self.sort))
        object.__setattr__(self, "fields", tuple(sorted({f.strip().lower() for f in self.fields if f.strip()})))
        object.__setattr__(self, "q", (self.q or "").strip() or None)
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(self, "page_size", max(1, self.page_size))
        object.__setattr__(self, "include", tuple(sorted({i.strip().lower() for i in self.include if i.strip()})))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def with_page(self, page: int) -> SearchRequest:
        return replace(self, page=page)

    def restricted_to(
        self,
        filterable: Container[str],
        sortable: Container[str],
        includable: Container[str] = (),
    ) -> SearchRequest:
        """Drop filter and sort clauses and includes whose name is not registered."""
        return replace(
            self,
            filters=tuple(c for c in self.filters if c.field in filterable),
            sort=tuple(c for c in self.sort if c.field in sortable),
            include=tuple(name for name in self.include if name in includable),
        )

    def canonical(self) -> dict[str, Any]:
        """JSON-ready canonical form, used as the cache-key hash input."""
        return {
            "filters": [[c.field, c.operator, c.value] for c in self.filters],
            "sort": [[c.field, c.direction.value] for c in self.sort],
            "fields": list(self.fields),
            "q": self.q,
            "page": self.page,
            "page_size": self.page_size,
            "include": list(self.include),
        }


def _first_per_field(clauses: tuple[SortClause, ...]) -> tuple[SortClause, ...]:
    seen: set[str] = set()
    kept: list[SortClause] = []
    for clause in clauses:
        if clause.field in seen:
            continue
        seen.add(clause.field)
        kept.append(clause)
    return tuple(kept)
