"""Observability – correlation and structured logging."""

from erp_commons.observability.correlation import CorrelationContext, RequestContext
from erp_commons.observability.logging import (
    CorrelationProcessor,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)

__all__ = [
    "CorrelationContext",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "RequestContext",
    "SensitiveFieldsFilter",
    "get_logger",
]
