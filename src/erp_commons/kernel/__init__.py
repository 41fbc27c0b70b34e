"""Kernel – framework-agnostic building blocks."""

from erp_commons.kernel.errors import (
    ApplicationError,
    BaseError,
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from erp_commons.kernel.types import Err, Ok, Result

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "Err",
    "InfrastructureError",
    "NotFoundError",
    "Ok",
    "Result",
    "ValidationError",
]
