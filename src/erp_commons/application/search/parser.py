"""Application search – query-string parser.

Grammar::

    filter[<field>]=<value>              implicit ``eq``
    filter[<field>][<op>]=<value>        explicit operator
    sort=<field1>,-<field2>              leading ``-`` = descending
    fields=<field1>,<field2>
    include=<relation1>,<relation2>
    q=<text>
    page=<int>
    pageSize=<int>

Parameter names are matched case-insensitively. Malformed fragments are
skipped; the parser never raises on user input.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Iterator, Mapping
from urllib.parse import parse_qsl

from erp_commons.application.search.query import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    OPERATORS,
    FilterClause,
    FilterOperator,
    SearchRequest,
    SortClause,
    SortDirection,
)
from erp_commons.config.settings import SearchSettings
from erp_commons.observability.logging import get_logger

__all__ = ["SearchQueryParser", "parse_filter_key", "parse_query_string", "parse_search_request"]

logger = get_logger(__name__)

FILTER_PREFIX = "filter["
MIN_FILTER_KEY_LENGTH = 8
OPERATOR_ALIASES = {"neq": FilterOperator.NE.value}

KEY_SORT = "sort"
KEY_FIELDS = "fields"
KEY_INCLUDE = "include"
KEY_QUERY = "q"
KEY_PAGE = "page"
KEY_PAGE_SIZE = "pagesize"

QueryParams = Mapping[str, Any] | Iterable[tuple[str, Any]]


def parse_filter_key(key: str) -> tuple[str, str] | None:
    """Return ``(field, operator)`` for a well-formed filter key, else ``None``.

    >>> parse_filter_key("filter[name][contains]")
    ('name', 'contains')
    >>> parse_filter_key("filter[isActive]")
    ('isactive', 'eq')
    """
    if len(key) < MIN_FILTER_KEY_LENGTH or key[: len(FILTER_PREFIX)].lower() != FILTER_PREFIX:
        return None
    close = key.find("]", len(FILTER_PREFIX))
    if close < 0:
        return None
    field = key[len(FILTER_PREFIX):close].strip().lower()
    if not field:
        return None

    rest = key[close + 1:]
    if not rest:
        operator = FilterOperator.EQ.value
    elif len(rest) > 2 and rest.startswith("[") and rest.endswith("]"):
        operator = rest[1:-1].strip().lower()
    else:
        return None

    operator = OPERATOR_ALIASES.get(operator, operator)
    if operator not in OPERATORS:
        return None
    return field, operator


class SearchQueryParser:
    """Turns a flat multi-map of query parameters into a :class:`SearchRequest`."""

    def __init__(
        self,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        if default_page_size < 1 or max_page_size < default_page_size:
            raise ValueError("page sizes must satisfy 1 <= default_page_size <= max_page_size")
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    @classmethod
    def from_settings(cls, settings: SearchSettings) -> SearchQueryParser:
        return cls(settings.default_page_size, settings.max_page_size)

    def parse(self, params: QueryParams) -> SearchRequest:
        filters: dict[tuple[str, str], set[str]] = defaultdict(set)
        sort_values: list[str] = []
        field_values: list[str] = []
        include_values: list[str] = []
        query_values: list[str] = []
        page_values: list[str] = []
        page_size_values: list[str] = []
        skipped: list[str] = []

        for key, value in _iter_params(params):
            name = key.strip().lower()
            if name.startswith(FILTER_PREFIX):
                parsed = parse_filter_key(key.strip())
                if parsed is None:
                    skipped.append(key)
                    continue
                filters[parsed].add(value)
            elif name == KEY_SORT:
                sort_values.append(value)
            elif name == KEY_FIELDS:
                field_values.append(value)
            elif name == KEY_INCLUDE:
                include_values.append(value)
            elif name == KEY_QUERY:
                query_values.append(value)
            elif name == KEY_PAGE:
                page_values.append(value)
            elif name == KEY_PAGE_SIZE:
                page_size_values.append(value)

        if skipped:
            logger.debug("search.parse.skipped_filters", keys=skipped)

        return SearchRequest(
            filters=tuple(
                FilterClause(field, operator, _join_values(operator, values))
                for (field, operator), values in filters.items()
            ),
            sort=self._parse_sort(sort_values),
            fields=tuple(_split_csv(field_values)),
            q=" ".join(v.strip() for v in query_values if v.strip()) or None,
            page=self._parse_page(page_values),
            page_size=self._parse_page_size(page_size_values),
            include=tuple(_split_csv(include_values)),
        )

    def _parse_sort(self, values: list[str]) -> tuple[SortClause, ...]:
        clauses: list[SortClause] = []
        for token in _split_csv(values):
            descending = token.startswith("-")
            field = token.lstrip("-+").strip()
            if not field:
                continue
            clauses.append(SortClause(field, SortDirection.DESC if descending else SortDirection.ASC))
        return tuple(clauses)

    def _parse_page(self, values: list[str]) -> int:
        page = _first_int(values)
        if page is None or page < 1:
            return 1
        return page

    def _parse_page_size(self, values: list[str]) -> int:
        size = _first_int(values)
        if size is None or size < 1:
            return self._default_page_size
        return min(size, self._max_page_size)


def _iter_params(params: QueryParams) -> Iterator[tuple[str, str]]:
    if hasattr(params, "multi_items"):
        items: Iterable[tuple[str, Any]] = params.multi_items()
    elif isinstance(params, Mapping):
        items = params.items()
    else:
        items = params
    for key, value in items:
        if not isinstance(key, str) or value is None:
            continue
        if isinstance(value, str):
            yield key, value
        elif isinstance(value, (list, tuple)):
            for item in value:
                if isinstance(item, str):
                    yield key, item


def _split_csv(values: Iterable[str]) -> Iterator[str]:
    for value in values:
        for token in value.split(","):
            token = token.strip()
            if token:
                yield token


def _join_values(operator: str, values: set[str]) -> str:
    if operator == FilterOperator.IN:
        # unordered set of items
        return ",".join(sorted(set(_split_csv(values))))
    return ",".join(sorted(values))


def _first_int(values: list[str]) -> int | None:
    if not values:
        return None
    try:
        return int(values[0].strip())
    except ValueError:
        return None


_default_parser = SearchQueryParser()


def parse_search_request(params: QueryParams) -> SearchRequest:
    """Parse with the default page-size bounds (20 / 100)."""
    return _default_parser.parse(params)


def parse_query_string(query_string: str, parser: SearchQueryParser | None = None) -> SearchRequest:
    """Parse a raw ``a=1&b=2`` query string (leading ``?`` allowed)."""
    pairs = parse_qsl(query_string.lstrip("?"), keep_blank_values=True)
    return (parser or _default_parser).parse(pairs)
