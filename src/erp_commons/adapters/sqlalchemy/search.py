"""SQLAlchemy adapter – SqlAlchemySearchBuilder.

Turns a :class:`~erp_commons.application.search.SearchRequest` into a
``WHERE`` predicate and an ``ORDER BY`` list over registered columns, then
runs the count and the page fetch as two queries::

    builder = SqlAlchemySearchBuilder(
        COMPANY_FILTERS,
        COMPANY_SORTS,
        default_order_by=(Company.created_at.desc(),),
        tiebreaker=Company.id,
    )
    page = await builder.execute(session, select(Company), request)

Filter values arrive as strings and are coerced to the column's Python type.
A value that cannot be coerced drops its clause; a field that is not
registered is ignored. Neither is an error.
"""
from __future__ import annotations

import datetime
import decimal
import enum
import uuid
from typing import Any, Callable, Generic, Sequence, TypeVar

from sqlalchemy import Select, String, and_, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from erp_commons.application.search import (
    FieldRegistry,
    FilterClause,
    FilterOperator,
    PageResult,
    SearchRequest,
)
from erp_commons.observability.logging import get_logger

__all__ = ["NULL_LITERAL", "SqlAlchemySearchBuilder", "coerce_value"]

logger = get_logger(__name__)

T = TypeVar("T")

NULL_LITERAL = "null"

_TRUE = frozenset({"true", "1", "yes"})
_FALSE = frozenset({"false", "0", "no"})


class _Invalid:
    def __repr__(self) -> str:
        return "<invalid>"


INVALID: Any = _Invalid()


def _python_type(column: Any) -> type | None:
    try:
        return column.expression.type.python_type
    except NotImplementedError:
        return None


def coerce_value(column: Any, raw: str) -> Any:  # noqa: PLR0911
    """Convert *raw* to the Python type of *column*, or return ``INVALID``."""
    python_type = _python_type(column)
    text = raw.strip()
    try:
        if python_type is None or python_type is str:
            return raw
        if python_type is bool:
            lowered = text.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            return INVALID
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        if python_type is decimal.Decimal:
            return decimal.Decimal(text)
        if python_type is datetime.datetime:
            value = datetime.datetime.fromisoformat(text)
            if value.tzinfo is not None:
                value = value.astimezone(datetime.UTC)
                if not getattr(column.expression.type, "timezone", False):
                    value = value.replace(tzinfo=None)
            return value
        if python_type is datetime.date:
            return datetime.date.fromisoformat(text)
        if python_type is uuid.UUID:
            return uuid.UUID(text)
        if issubclass(python_type, enum.Enum):
            return _coerce_enum(python_type, text)
    except (ValueError, ArithmeticError):
        return INVALID
    return raw


def _coerce_enum(enum_type: type[enum.Enum], text: str) -> Any:
    lowered = text.lower()
    for member in enum_type:
        if member.name.lower() == lowered or str(member.value).lower() == lowered:
            return member
    return INVALID


class SqlAlchemySearchBuilder(Generic[T]):
    """Stateless predicate/ordering builder for one mapped entity.

    ``tiebreaker`` (normally the primary key) is appended to every ordering
    so rows with equal sort keys keep a stable position across pages.
    ``includes`` maps the relation names a request may ask for with
    ``include=`` to relationship attributes; nothing else is eager-loaded.
    """

    def __init__(
        self,
        filters: FieldRegistry[Any],
        sorts: FieldRegistry[Any],
        *,
        default_order_by: Sequence[Any],
        tiebreaker: Any,
        includes: FieldRegistry[Any] | None = None,
    ) -> None:
        self.filters = filters
        self.sorts = sorts
        self.includes: FieldRegistry[Any] = includes if includes is not None else FieldRegistry({})
        self._default_order_by = tuple(default_order_by)
        self._tiebreaker = tiebreaker

    # -- predicate ------------------------------------------------------------

    def build_predicate(self, request: SearchRequest) -> Any | None:
        clauses = []
        for clause in request.filters:
            expression = self._filter_clause(clause)
            if expression is not None:
                clauses.append(expression)
        if request.q and self.filters.searchable:
            clauses.append(or_(*(
                _as_text(column).icontains(request.q, autoescape=True)
                for column in self.filters.searchable
            )))
        if not clauses:
            return None
        return and_(*clauses)

    def _filter_clause(self, clause: FilterClause) -> Any | None:  # noqa: PLR0911
        column = self.filters.resolve(clause.field)
        if column is None:
            logger.debug("search.filter.unknown_field", field=clause.field)
            return None

        op = clause.operator
        raw = clause.value

        if op in (FilterOperator.EQ, FilterOperator.NE) and raw.strip().lower() == NULL_LITERAL:
            return column.is_(None) if op == FilterOperator.EQ else column.is_not(None)

        if op == FilterOperator.CONTAINS:
            return _as_text(column).icontains(raw, autoescape=True)
        if op == FilterOperator.STARTSWITH:
            return _as_text(column).istartswith(raw, autoescape=True)
        if op == FilterOperator.ENDSWITH:
            return _as_text(column).iendswith(raw, autoescape=True)

        if op == FilterOperator.IN:
            values = [coerce_value(column, part) for part in raw.split(",") if part.strip()]
            values = [v for v in values if v is not INVALID]
            if not values:
                return self._dropped(clause)
            return column.in_(values)

        value = coerce_value(column, raw)
        if value is INVALID:
            return self._dropped(clause)
        if op == FilterOperator.EQ:
            return column == value
        if op == FilterOperator.NE:
            return column != value
        if op == FilterOperator.GT:
            return column > value
        if op == FilterOperator.GTE:
            return column >= value
        if op == FilterOperator.LT:
            return column < value
        if op == FilterOperator.LTE:
            return column <= value
        return self._dropped(clause)

    def _dropped(self, clause: FilterClause) -> None:
        logger.debug("search.filter.dropped", field=clause.field, operator=clause.operator, value=clause.value)
        return None

    # -- ordering -------------------------------------------------------------

    def build_order_by(self, request: SearchRequest) -> list[Any]:
        order_by = []
        for clause in request.sort:
            column = self.sorts.resolve(clause.field)
            if column is None:
                logger.debug("search.sort.unknown_field", field=clause.field)
                continue
            order_by.append(column.desc() if clause.descending else column.asc())
        if not order_by:
            order_by = list(self._default_order_by)
        order_by.append(self._tiebreaker.asc())
        return order_by

    # -- execution ------------------------------------------------------------

    def load_options(self, request: SearchRequest) -> list[Any]:
        options = []
        for name in request.include:
            relationship = self.includes.resolve(name)
            if relationship is None:
                logger.debug("search.include.unknown", include=name)
                continue
            options.append(selectinload(relationship))
        return options

    def apply_filters(self, statement: Select[Any], request: SearchRequest) -> Select[Any]:
        predicate = self.build_predicate(request)
        if predicate is None:
            return statement
        return statement.where(predicate)

    async def count(self, session: AsyncSession, statement: Select[Any]) -> int:
        count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        return int((await session.execute(count_stmt)).scalar_one())

    async def execute(
        self,
        session: AsyncSession,
        statement: Select[Any],
        request: SearchRequest,
        *,
        projection: Callable[[Any], T] | None = None,
        include: Callable[[Select[Any]], Select[Any]] | None = None,
    ) -> PageResult[T]:
        """Run the count and page queries for *request* against *statement*.

        Registered ``request.include`` relations are loaded with ``selectinload``
        on the page query only. The ``include`` callable may add further loader
        options; ``projection`` maps each row before the session closes.
        """
        filtered = self.apply_filters(statement, request)
        total = await self.count(session, filtered)
        if total == 0 or request.offset >= total:
            return PageResult.empty(request, total_count=total)

        page_stmt = (
            filtered.order_by(None)
            .order_by(*self.build_order_by(request))
            .offset(request.offset)
            .limit(request.page_size)
        )
        options = self.load_options(request)
        if options:
            page_stmt = page_stmt.options(*options)
        if include is not None:
            page_stmt = include(page_stmt)
        rows = (await session.scalars(page_stmt)).all()
        items = [projection(row) for row in rows] if projection is not None else list(rows)
        return PageResult(items=items, total_count=total, page=request.page, page_size=request.page_size)


def _as_text(column: Any) -> Any:
    if _python_type(column) is str:
        return column
    return cast(column, String)
