"""Application cache – cache-aside base for the per-entity services.

Reads check the cache first and populate it on a miss with the TTL of the
read's tier. Writes run inside a unit of work; only after the commit
succeeds are the entity's keys, its list keys and every cached search page
(``{entity}:search:*``) removed.

Every public operation returns a :class:`~erp_commons.kernel.types.Result`:
not-found, conflict and validation outcomes come back as ``Err`` values,
infrastructure failures as ``Err(InfrastructureError)`` after being logged.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, ClassVar, Container, Generic, Iterable, Mapping, TypeVar
from uuid import UUID

from erp_commons.application.cache.keys import EntityCacheKeys
from erp_commons.application.cache.service import CacheService, CacheTtl
from erp_commons.application.search import PageResult, SearchRequest
from erp_commons.kernel.ddd import EntityRepository, UnitOfWork
from erp_commons.kernel.errors import (
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from erp_commons.kernel.types import Err, Ok, Result
from erp_commons.observability.logging import get_logger

__all__ = ["CachedEntityService", "SearchFields"]

TEntity = TypeVar("TEntity")
TDto = TypeVar("TDto")


@dataclass(frozen=True)
class SearchFields:
    """Names a search may filter, sort and include; used to prune requests before hashing."""

    filterable: Container[str]
    sortable: Container[str]
    includable: Container[str] = ()


class CachedEntityService(abc.ABC, Generic[TEntity, TDto]):
    """Cache-aside service over one entity repository."""

    resource: ClassVar[str]
    dto_type: ClassVar[type[Any]]

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheService,
        *,
        keys: EntityCacheKeys,
        ttl: CacheTtl | None = None,
        search_fields: SearchFields | None = None,
        mapper: Callable[[TEntity], TDto] | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache
        self._keys = keys
        self._ttl = ttl or CacheTtl()
        self._search_fields = search_fields
        self._mapper: Callable[[TEntity], TDto] = mapper or self.dto_type.from_entity
        self._log = get_logger(__name__, resource=self.resource)

    @property
    def keys(self) -> EntityCacheKeys:
        return self._keys

    # -- hooks ----------------------------------------------------------------

    @abc.abstractmethod
    def _repository(self, uow: UnitOfWork) -> EntityRepository[TEntity]: ...

    @abc.abstractmethod
    def _entity_keys(self, dto: TDto) -> Iterable[str]:
        """Keys that hold *dto* itself (id, natural keys, relation lists)."""

    @abc.abstractmethod
    def _create_values(self, dto: Any) -> Mapping[str, Any]: ...

    @abc.abstractmethod
    def _update_changes(self, dto: Any) -> Mapping[str, Any]: ...

    async def _check_create(self, uow: UnitOfWork, dto: Any) -> BaseError | None:  # noqa: ARG002
        return None

    async def _check_update(self, uow: UnitOfWork, id: UUID, dto: Any) -> BaseError | None:  # noqa: ARG002
        return None

    # -- reads ----------------------------------------------------------------

    async def get_by_id(self, id: UUID) -> Result[TDto]:
        return await self._get_one(self._keys.by_id(id), lambda repo: repo.get_by_id(id), id)

    async def get_all(self) -> Result[list[TDto]]:
        return await self._get_list(self._keys.all(), lambda repo: repo.list_all())

    async def get_active(self) -> Result[list[TDto]]:
        return await self._get_list(self._keys.active(), lambda repo: repo.list_active())

    @abc.abstractmethod
    async def get_by_natural_key(self, value: Any) -> Result[TDto]: ...

    async def search(self, request: SearchRequest) -> Result[PageResult[TDto]]:
        if self._search_fields is not None:
            fields = self._search_fields
            request = request.restricted_to(fields.filterable, fields.sortable, fields.includable)
        key = self._keys.search(request)
        cached = await self._cache.get(key, PageResult[self.dto_type])
        if cached is not None:
            return Ok(cached)
        try:
            async with self._uow_factory() as uow:
                page = await self._repository(uow).search(request)
                result = page.map(self._mapper)
        except InfrastructureError as exc:
            return self._failure("search", exc)
        await self._cache.set(key, result, self._ttl.search)
        return Ok(result)

    # -- writes ---------------------------------------------------------------

    async def create(self, dto: Any) -> Result[TDto]:
        errors = dto.validate()
        if errors:
            return Err(ValidationError(f"Invalid {self.resource}", errors=errors))
        try:
            async with self._uow_factory() as uow:
                problem = await self._check_create(uow, dto)
                if problem is not None:
                    return Err(problem)
                entity = await self._repository(uow).add(self._create_values(dto))
                created = self._mapper(entity)
        except DomainError as exc:
            return Err(exc)
        except InfrastructureError as exc:
            return self._failure("create", exc)
        self._log.info(f"{self.resource}.created", id=str(created.id))
        await self._invalidate(created)
        return Ok(created)

    async def update(self, id: UUID, dto: Any) -> Result[TDto]:
        if dto.id is not None and dto.id != id:
            return Err(ValidationError(
                f"{self.resource} id mismatch",
                errors=[{"field": "id", "message": "does not match the id in the request path"}],
            ))
        errors = dto.validate()
        if errors:
            return Err(ValidationError(f"Invalid {self.resource}", errors=errors))
        try:
            async with self._uow_factory() as uow:
                repo = self._repository(uow)
                entity = await repo.get_by_id(id)
                if entity is None:
                    return Err(NotFoundError(self.resource, id))
                previous = self._mapper(entity)
                problem = await self._check_update(uow, id, dto)
                if problem is not None:
                    return Err(problem)
                entity = await repo.update(entity, self._update_changes(dto), expected_version=dto.version)
                updated = self._mapper(entity)
        except ConflictError as exc:
            self._log.info(f"{self.resource}.update_conflict", id=str(id), code=exc.code)
            return Err(exc)
        except DomainError as exc:
            return Err(exc)
        except InfrastructureError as exc:
            return self._failure("update", exc)
        self._log.info(f"{self.resource}.updated", id=str(id))
        await self._invalidate(previous, updated)
        return Ok(updated)

    async def delete(self, id: UUID) -> Result[None]:
        try:
            async with self._uow_factory() as uow:
                repo = self._repository(uow)
                entity = await repo.get_by_id(id)
                if entity is None:
                    return Err(NotFoundError(self.resource, id))
                previous = self._mapper(entity)
                await repo.delete(entity)
        except DomainError as exc:
            return Err(exc)
        except InfrastructureError as exc:
            return self._failure("delete", exc)
        self._log.info(f"{self.resource}.deleted", id=str(id))
        await self._invalidate(previous)
        return Ok(None)

    # -- helpers --------------------------------------------------------------

    async def _get_one(
        self,
        key: str,
        load: Callable[[EntityRepository[TEntity]], Awaitable[TEntity | None]],
        identifier: Any,
    ) -> Result[TDto]:
        cached = await self._cache.get(key, self.dto_type)
        if cached is not None:
            return Ok(cached)
        try:
            async with self._uow_factory() as uow:
                entity = await load(self._repository(uow))
                dto = None if entity is None else self._mapper(entity)
        except InfrastructureError as exc:
            return self._failure("get", exc)
        if dto is None:
            return Err(NotFoundError(self.resource, identifier))
        await self._cache.set(key, dto, self._ttl.entity)
        return Ok(dto)

    async def _get_list(
        self,
        key: str,
        load: Callable[[EntityRepository[TEntity]], Awaitable[list[TEntity]]],
    ) -> Result[list[TDto]]:
        cached = await self._cache.get(key, list[self.dto_type])
        if cached is not None:
            return Ok(cached)
        try:
            async with self._uow_factory() as uow:
                entities = await load(self._repository(uow))
                dtos = [self._mapper(e) for e in entities]
        except InfrastructureError as exc:
            return self._failure("list", exc)
        await self._cache.set(key, dtos, self._ttl.list)
        return Ok(dtos)

    async def _invalidate(self, *snapshots: TDto) -> None:
        keys = {self._keys.all(), self._keys.active()}
        for dto in snapshots:
            keys.update(self._entity_keys(dto))
        for key in sorted(keys):
            await self._cache.remove(key)
        await self._cache.remove_by_pattern(self._keys.search_pattern())

    def _failure(self, operation: str, exc: InfrastructureError) -> Err[InfrastructureError]:
        self._log.error(f"{self.resource}.{operation}_failed", error=exc.message, code=exc.code)
        return Err(InfrastructureError(
            f"Failed to {operation} {self.resource}",
            code=f"{self.resource}.{operation}_failed",
            cause=exc,
        ))
