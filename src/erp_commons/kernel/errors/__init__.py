"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ConflictError
    │       └── ConcurrencyConflictError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        └── SerializationError
"""

from erp_commons.kernel.errors.application import ApplicationError
from erp_commons.kernel.errors.base import BaseError
from erp_commons.kernel.errors.domain import (
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from erp_commons.kernel.errors.infrastructure import (
    ConnectionError,
    InfrastructureError,
    SerializationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "ConnectionError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "SerializationError",
    "ValidationError",
]
