"""Repository port – async persistence for one entity type."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Generic, Mapping, TypeVar
from uuid import UUID

if TYPE_CHECKING:
    from erp_commons.application.search import PageResult, SearchRequest

TEntity = TypeVar("TEntity")


class EntityRepository(abc.ABC, Generic[TEntity]):
    """Port: repository for an entity carrying ``id`` and ``version``.

    Implementations raise :class:`~erp_commons.kernel.errors.ConflictError`
    (or its ``ConcurrencyConflictError`` subtype) for constraint and
    row-version violations and
    :class:`~erp_commons.kernel.errors.InfrastructureError` for storage
    failures.
    """

    @abc.abstractmethod
    async def get_by_id(self, id: UUID) -> TEntity | None: ...

    @abc.abstractmethod
    async def get_by(self, field: str, value: Any, *, ignore_case: bool = False) -> TEntity | None:
        """Return the single entity whose *field* equals *value*."""

    @abc.abstractmethod
    async def exists_by(
        self,
        criteria: Mapping[str, Any],
        *,
        exclude_id: UUID | None = None,
        ignore_case: bool = False,
    ) -> bool: ...

    @abc.abstractmethod
    async def list_all(self) -> list[TEntity]: ...

    @abc.abstractmethod
    async def list_active(self) -> list[TEntity]: ...

    @abc.abstractmethod
    async def list_by(self, **criteria: Any) -> list[TEntity]: ...

    @abc.abstractmethod
    async def search(self, request: SearchRequest) -> PageResult[TEntity]: ...

    @abc.abstractmethod
    async def add(self, values: Mapping[str, Any]) -> TEntity: ...

    @abc.abstractmethod
    async def update(
        self,
        entity: TEntity,
        changes: Mapping[str, Any],
        *,
        expected_version: int,
    ) -> TEntity:
        """Apply *changes* when the stored version equals *expected_version*."""

    @abc.abstractmethod
    async def delete(self, entity: TEntity) -> None: ...


__all__ = ["EntityRepository"]
