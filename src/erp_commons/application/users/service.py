"""Users – cache-aside UserService.

Email and user name are unique without regard to case; their cache keys
use the lower-cased value.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping
from uuid import UUID

from erp_commons.application.cache.aside import CachedEntityService
from erp_commons.application.cache.keys import USER_KEYS
from erp_commons.application.users.dtos import CreateUserDto, UpdateUserDto, UserDto
from erp_commons.kernel.ddd import EntityRepository, UnitOfWork
from erp_commons.kernel.errors import BaseError, ConflictError
from erp_commons.kernel.types import Result

__all__ = ["UserService"]


def _norm(value: str) -> str:
    return value.strip().lower()


class UserService(CachedEntityService[Any, UserDto]):
    resource = "user"
    dto_type = UserDto

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("keys", USER_KEYS)
        super().__init__(*args, **kwargs)

    def _repository(self, uow: UnitOfWork) -> EntityRepository[Any]:
        return uow.users

    def _entity_keys(self, dto: UserDto) -> Iterable[str]:
        return (
            self._keys.by_id(dto.id),
            self._keys.by_field("email", _norm(dto.email)),
            self._keys.by_field("username", _norm(dto.user_name)),
        )

    async def get_by_email(self, email: str) -> Result[UserDto]:
        email = _norm(email)
        return await self._get_one(
            self._keys.by_field("email", email),
            lambda repo: repo.get_by("email", email, ignore_case=True),
            email,
        )

    async def get_by_username(self, user_name: str) -> Result[UserDto]:
        user_name = _norm(user_name)
        return await self._get_one(
            self._keys.by_field("username", user_name),
            lambda repo: repo.get_by("user_name", user_name, ignore_case=True),
            user_name,
        )

    async def get_by_natural_key(self, value: str) -> Result[UserDto]:
        return await self.get_by_email(value)

    def _create_values(self, dto: CreateUserDto) -> Mapping[str, Any]:
        return {
            "email": _norm(dto.email),
            "user_name": dto.user_name.strip(),
            "password_hash": dto.password_hash,
            "first_name": dto.first_name.strip(),
            "last_name": dto.last_name.strip(),
            "phone": dto.phone,
            "is_active": dto.is_active,
        }

    def _update_changes(self, dto: UpdateUserDto) -> Mapping[str, Any]:
        return {
            "email": _norm(dto.email),
            "user_name": dto.user_name.strip(),
            "first_name": dto.first_name.strip(),
            "last_name": dto.last_name.strip(),
            "phone": dto.phone,
            "is_active": dto.is_active,
            "email_confirmed": dto.email_confirmed,
        }

    async def _check_create(self, uow: UnitOfWork, dto: CreateUserDto) -> BaseError | None:
        return await self._check_unique(uow, dto.email, dto.user_name, exclude_id=None)

    async def _check_update(self, uow: UnitOfWork, id: UUID, dto: UpdateUserDto) -> BaseError | None:
        return await self._check_unique(uow, dto.email, dto.user_name, exclude_id=id)

    async def _check_unique(
        self,
        uow: UnitOfWork,
        email: str,
        user_name: str,
        exclude_id: UUID | None,
    ) -> BaseError | None:
        if await uow.users.exists_by({"email": _norm(email)}, exclude_id=exclude_id, ignore_case=True):
            return ConflictError(
                f"A user with email '{_norm(email)}' already exists",
                code="user.duplicate_email",
                detail={"email": _norm(email)},
            )
        if await uow.users.exists_by({"user_name": user_name.strip()}, exclude_id=exclude_id, ignore_case=True):
            return ConflictError(
                f"A user with user name '{user_name.strip()}' already exists",
                code="user.duplicate_user_name",
                detail={"user_name": user_name.strip()},
            )
        return None
