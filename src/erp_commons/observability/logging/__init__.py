"""Observability – structured logging helpers."""
from erp_commons.observability.logging.factory import JsonLoggerFactory
from erp_commons.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from erp_commons.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
