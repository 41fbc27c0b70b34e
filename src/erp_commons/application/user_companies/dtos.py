"""User companies – membership role and DTOs."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from erp_commons.application.dto import EntityDto, FieldErrors

__all__ = ["CompanyRole", "CreateUserCompanyDto", "UpdateUserCompanyDto", "UserCompanyDto"]


class CompanyRole(enum.StrEnum):
    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    VIEWER = "viewer"


@dataclass(frozen=True)
class UserCompanyDto(EntityDto):
    id: UUID
    user_id: UUID
    company_id: UUID
    role: CompanyRole
    is_default_company: bool
    is_active: bool
    joined_at: datetime
    left_at: datetime | None
    created_at: datetime
    updated_at: datetime | None
    version: int
    # filled only when the related rows were loaded (``include=user,company``)
    user_name: str | None = None
    company_name: str | None = None
    company_code: str | None = None


@dataclass(frozen=True)
class CreateUserCompanyDto:
    user_id: UUID
    company_id: UUID
    role: CompanyRole = CompanyRole.MEMBER
    is_default_company: bool = False
    is_active: bool = True

    def validate(self) -> FieldErrors:
        errors: FieldErrors = []
        if self.is_default_company and not self.is_active:
            errors.append({"field": "is_default_company", "message": "an inactive membership cannot be the default"})
        return errors


@dataclass(frozen=True, kw_only=True)
class UpdateUserCompanyDto:
    version: int
    role: CompanyRole = CompanyRole.MEMBER
    is_default_company: bool = False
    is_active: bool = True
    left_at: datetime | None = None
    id: UUID | None = None

    def validate(self) -> FieldErrors:
        errors: FieldErrors = []
        if self.is_active and self.left_at is not None:
            errors.append({"field": "left_at", "message": "must be empty while the membership is active"})
        return errors
