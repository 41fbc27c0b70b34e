"""Companies – cache-aside CompanyService."""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping
from uuid import UUID

from erp_commons.application.cache.aside import CachedEntityService
from erp_commons.application.cache.keys import COMPANY_KEYS
from erp_commons.application.companies.dtos import CompanyDto, CreateCompanyDto, UpdateCompanyDto
from erp_commons.kernel.ddd import EntityRepository, UnitOfWork
from erp_commons.kernel.errors import BaseError, ConflictError
from erp_commons.kernel.types import Result

__all__ = ["CompanyService"]


class CompanyService(CachedEntityService[Any, CompanyDto]):
    """Companies keyed by id and by their unique ``code``."""

    resource = "company"
    dto_type = CompanyDto

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("keys", COMPANY_KEYS)
        super().__init__(*args, **kwargs)

    def _repository(self, uow: UnitOfWork) -> EntityRepository[Any]:
        return uow.companies

    def _entity_keys(self, dto: CompanyDto) -> Iterable[str]:
        return (self._keys.by_id(dto.id), self._keys.by_field("code", dto.code))

    async def get_by_code(self, code: str) -> Result[CompanyDto]:
        code = code.strip()
        return await self._get_one(
            self._keys.by_field("code", code),
            lambda repo: repo.get_by("code", code),
            code,
        )

    async def get_by_natural_key(self, value: str) -> Result[CompanyDto]:
        return await self.get_by_code(value)

    def _create_values(self, dto: CreateCompanyDto) -> Mapping[str, Any]:
        values = dataclasses.asdict(dto)
        values["code"] = dto.code.strip()
        return values

    def _update_changes(self, dto: UpdateCompanyDto) -> Mapping[str, Any]:
        changes = dataclasses.asdict(dto)
        del changes["id"], changes["version"]
        changes["code"] = dto.code.strip()
        return changes

    async def _check_create(self, uow: UnitOfWork, dto: CreateCompanyDto) -> BaseError | None:
        return await self._check_code(uow, dto.code.strip(), exclude_id=None)

    async def _check_update(self, uow: UnitOfWork, id: UUID, dto: UpdateCompanyDto) -> BaseError | None:
        return await self._check_code(uow, dto.code.strip(), exclude_id=id)

    async def _check_code(self, uow: UnitOfWork, code: str, exclude_id: UUID | None) -> BaseError | None:
        if await uow.companies.exists_by({"code": code}, exclude_id=exclude_id):
            return ConflictError(
                f"A company with code '{code}' already exists",
                code="company.duplicate_code",
                detail={"code": code},
            )
        return None
