"""Application search – query-string parsing, field registries and page results."""
from erp_commons.application.search.parser import (
    SearchQueryParser,
    parse_filter_key,
    parse_query_string,
    parse_search_request,
)
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
from erp_commons.application.search.registry import FieldRegistry
from erp_commons.application.search.result import PageResult

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "OPERATORS",
    "FieldRegistry",
    "FilterClause",
    "FilterOperator",
    "PageResult",
    "SearchQueryParser",
    "SearchRequest",
    "SortClause",
    "SortDirection",
    "parse_filter_key",
    "parse_query_string",
    "parse_search_request",
]
