"""Companies – DTOs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from erp_commons.application.dto import EntityDto, FieldErrors, require_email, require_text

__all__ = ["CompanyDto", "CreateCompanyDto", "UpdateCompanyDto"]


@dataclass(frozen=True)
class CompanyDto(EntityDto):
    id: UUID
    name: str
    code: str
    email: str | None
    phone: str | None
    city: str | None
    country: str | None
    industry: str | None
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime | None
    version: int


@dataclass(frozen=True)
class CreateCompanyDto:
    name: str
    code: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    industry: str | None = None
    currency: str = "USD"
    is_active: bool = True

    def validate(self) -> FieldErrors:
        errors: FieldErrors = []
        require_text(errors, "name", self.name, max_length=200)
        require_text(errors, "code", self.code, max_length=50)
        require_text(errors, "currency", self.currency, max_length=3)
        if self.email:
            require_email(errors, "email", self.email)
        return errors


@dataclass(frozen=True, kw_only=True)
class UpdateCompanyDto(CreateCompanyDto):
    """Full replacement of a company's editable fields.

    ``version`` is the row version the caller read; the update is rejected
    with a conflict when it is no longer current.
    """

    version: int
    id: UUID | None = None
