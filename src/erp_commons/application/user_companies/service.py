"""User companies – cache-aside UserCompanyService.

Besides the id key, a membership is cached under the ``(user, company)``
pair and inside the per-user and per-company lists; all four are removed
when the membership changes.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping
from uuid import UUID

from erp_commons.application.cache.aside import CachedEntityService
from erp_commons.application.cache.keys import USER_COMPANY_KEYS
from erp_commons.application.user_companies.dtos import (
    CreateUserCompanyDto,
    UpdateUserCompanyDto,
    UserCompanyDto,
)
from erp_commons.kernel.ddd import EntityRepository, UnitOfWork
from erp_commons.kernel.errors import BaseError, ConflictError, NotFoundError
from erp_commons.kernel.types import Result

__all__ = ["UserCompanyService"]


class UserCompanyService(CachedEntityService[Any, UserCompanyDto]):
    resource = "user_company"
    dto_type = UserCompanyDto

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("keys", USER_COMPANY_KEYS)
        super().__init__(*args, **kwargs)

    def _repository(self, uow: UnitOfWork) -> EntityRepository[Any]:
        return uow.user_companies

    def _entity_keys(self, dto: UserCompanyDto) -> Iterable[str]:
        return (
            self._keys.by_id(dto.id),
            self._keys.by_user_and_company(dto.user_id, dto.company_id),
            self._keys.by_user(dto.user_id),
            self._keys.by_company(dto.company_id),
        )

    async def get_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Result[UserCompanyDto]:
        async def load(repo: EntityRepository[Any]) -> Any:
            matches = await repo.list_by(user_id=user_id, company_id=company_id)
            return matches[0] if matches else None

        return await self._get_one(
            self._keys.by_user_and_company(user_id, company_id),
            load,
            f"{user_id}/{company_id}",
        )

    async def get_by_natural_key(self, value: tuple[UUID, UUID]) -> Result[UserCompanyDto]:
        user_id, company_id = value
        return await self.get_by_user_and_company(user_id, company_id)

    async def get_by_user(self, user_id: UUID) -> Result[list[UserCompanyDto]]:
        return await self._get_list(
            self._keys.by_user(user_id),
            lambda repo: repo.list_by(user_id=user_id),
        )

    async def get_by_company(self, company_id: UUID) -> Result[list[UserCompanyDto]]:
        return await self._get_list(
            self._keys.by_company(company_id),
            lambda repo: repo.list_by(company_id=company_id),
        )

    def _create_values(self, dto: CreateUserCompanyDto) -> Mapping[str, Any]:
        return {
            "user_id": dto.user_id,
            "company_id": dto.company_id,
            "role": dto.role,
            "is_default_company": dto.is_default_company,
            "is_active": dto.is_active,
        }

    def _update_changes(self, dto: UpdateUserCompanyDto) -> Mapping[str, Any]:
        return {
            "role": dto.role,
            "is_default_company": dto.is_default_company,
            "is_active": dto.is_active,
            "left_at": dto.left_at,
        }

    async def _check_create(self, uow: UnitOfWork, dto: CreateUserCompanyDto) -> BaseError | None:
        if await uow.users.get_by_id(dto.user_id) is None:
            return NotFoundError("user", dto.user_id)
        if await uow.companies.get_by_id(dto.company_id) is None:
            return NotFoundError("company", dto.company_id)
        if await uow.user_companies.exists_by({"user_id": dto.user_id, "company_id": dto.company_id}):
            return ConflictError(
                "User is already assigned to this company",
                code="user_company.duplicate_assignment",
                detail={"user_id": str(dto.user_id), "company_id": str(dto.company_id)},
            )
        return None

    async def delete_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Result[None]:
        """Remove the membership identified by its natural key."""
        found = await self.get_by_user_and_company(user_id, company_id)
        if found.is_err():
            return found
        return await self.delete(found.unwrap().id)

