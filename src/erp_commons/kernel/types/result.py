"""Tagged result – Ok and Err variants returned by the service layer.

``Err`` carries a :class:`~erp_commons.kernel.errors.BaseError`; the error
class is the error kind (not-found, conflict, validation, infrastructure).
"""

from __future__ import annotations

from typing import Callable, Generic, NoReturn, TypeVar

from erp_commons.kernel.errors import BaseError

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=BaseError)


class Ok(Generic[T]):
    """Successful result variant."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def is_err_of(self, kind: type[BaseError]) -> bool:  # noqa: ARG002
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self._value

    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        return Ok(func(self._value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and other._value == self._value

    def __hash__(self) -> int:
        return hash(("ok", self._value))

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"


class Err(Generic[E]):
    """Error result variant."""

    __slots__ = ("_error",)

    def __init__(self, error: E) -> None:
        self._error = error

    @property
    def error(self) -> E:
        return self._error

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def is_err_of(self, kind: type[BaseError]) -> bool:
        """Return ``True`` when the carried error is an instance of *kind*."""
        return isinstance(self._error, kind)

    def unwrap(self) -> NoReturn:
        raise self._error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[T], U]) -> "Err[E]":  # noqa: ARG002
        return self

    def __repr__(self) -> str:
        return f"Err({self._error!r})"


type Result[T] = Ok[T] | Err[BaseError]

__all__ = ["Err", "Ok", "Result"]
