"""SQLAlchemy adapter – translate SQLAlchemy exceptions into kernel errors."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from erp_commons.kernel.errors import (
    ConcurrencyConflictError,
    ConflictError,
    ConnectionError,
    InfrastructureError,
)


@contextlib.contextmanager
def translate_errors(resource: str, identifier: Any = None) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as kernel errors.

    * ``StaleDataError``  → :class:`ConcurrencyConflictError`
    * ``IntegrityError``  → :class:`ConflictError`
    * invalidated DBAPI connection → :class:`ConnectionError`
    * any other ``SQLAlchemyError`` → :class:`InfrastructureError`
    """
    try:
        yield
    except StaleDataError as exc:
        raise ConcurrencyConflictError(resource, identifier, cause=exc) from exc
    except IntegrityError as exc:
        raise ConflictError(
            f"{resource} violates a uniqueness or reference constraint",
            code=f"{resource}.constraint_violation",
            cause=exc,
        ) from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise ConnectionError("database", cause=exc) from exc
        raise InfrastructureError(f"Database error while handling {resource}", cause=exc) from exc
    except SQLAlchemyError as exc:
        raise InfrastructureError(f"Database error while handling {resource}", cause=exc) from exc


__all__ = ["translate_errors"]
