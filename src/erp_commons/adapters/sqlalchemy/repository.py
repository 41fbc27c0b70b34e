"""SQLAlchemy adapter – SqlAlchemyEntityRepository."""
from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from erp_commons.adapters.sqlalchemy.errors import translate_errors
from erp_commons.adapters.sqlalchemy.search import SqlAlchemySearchBuilder
from erp_commons.application.search import PageResult, SearchRequest
from erp_commons.kernel.ddd import EntityRepository
from erp_commons.kernel.errors import ConcurrencyConflictError
from erp_commons.kernel.time import utc_now

TModel = TypeVar("TModel")


class SqlAlchemyEntityRepository(EntityRepository[TModel], Generic[TModel]):
    """Generic async repository for the versioned ERP models."""

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[TModel],
        search_builder: SqlAlchemySearchBuilder[TModel],
    ) -> None:
        self._session = session
        self._model = model_class
        self._search = search_builder
        self._resource = model_class.__name__

    def _column(self, field: str) -> Any:
        return getattr(self._model, field)

    def _where(self, criteria: Mapping[str, Any], ignore_case: bool) -> list[Any]:
        conditions = []
        for field, value in criteria.items():
            column = self._column(field)
            if ignore_case and isinstance(value, str):
                conditions.append(func.lower(column) == value.lower())
            else:
                conditions.append(column == value)
        return conditions

    def _ordered(self) -> Any:
        return select(self._model).order_by(*self._search.build_order_by(SearchRequest()))

    async def get_by_id(self, id: UUID) -> TModel | None:
        with translate_errors(self._resource, id):
            return await self._session.get(self._model, id)

    async def get_by(self, field: str, value: Any, *, ignore_case: bool = False) -> TModel | None:
        stmt = select(self._model).where(*self._where({field: value}, ignore_case)).limit(1)
        with translate_errors(self._resource, value):
            return (await self._session.scalars(stmt)).first()

    async def exists_by(
        self,
        criteria: Mapping[str, Any],
        *,
        exclude_id: UUID | None = None,
        ignore_case: bool = False,
    ) -> bool:
        conditions = self._where(criteria, ignore_case)
        if exclude_id is not None:
            conditions.append(self._column("id") != exclude_id)
        stmt = select(exists().where(*conditions))
        with translate_errors(self._resource):
            return bool((await self._session.execute(stmt)).scalar())

    async def list_all(self) -> list[TModel]:
        with translate_errors(self._resource):
            return list((await self._session.scalars(self._ordered())).all())

    async def list_active(self) -> list[TModel]:
        return await self.list_by(is_active=True)

    async def list_by(self, **criteria: Any) -> list[TModel]:
        stmt = self._ordered().where(*self._where(criteria, ignore_case=False))
        with translate_errors(self._resource):
            return list((await self._session.scalars(stmt)).all())

    async def search(self, request: SearchRequest) -> PageResult[TModel]:
        with translate_errors(self._resource):
            return await self._search.execute(self._session, select(self._model), request)

    async def add(self, values: Mapping[str, Any]) -> TModel:
        entity = self._model(**values)
        with translate_errors(self._resource):
            self._session.add(entity)
            await self._session.flush()
            await self._session.refresh(entity)
        return entity

    async def update(
        self,
        entity: TModel,
        changes: Mapping[str, Any],
        *,
        expected_version: int,
    ) -> TModel:
        identifier = getattr(entity, "id", None)
        if getattr(entity, "version") != expected_version:
            raise ConcurrencyConflictError(
                self._resource,
                identifier,
                detail={"expected_version": expected_version, "current_version": getattr(entity, "version")},
            )
        for field, value in changes.items():
            setattr(entity, field, value)
        setattr(entity, "updated_at", utc_now())
        with translate_errors(self._resource, identifier):
            await self._session.flush()
            await self._session.refresh(entity)
        return entity

    async def delete(self, entity: TModel) -> None:
        with translate_errors(self._resource, getattr(entity, "id", None)):
            await self._session.delete(entity)
            await self._session.flush()


__all__ = ["SqlAlchemyEntityRepository"]
