"""Users – DTOs.

``UserDto`` never carries the password hash; it is write-only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from erp_commons.application.dto import EntityDto, FieldErrors, require_email, require_text

__all__ = ["CreateUserDto", "UpdateUserDto", "UserDto"]


@dataclass(frozen=True)
class UserDto(EntityDto):
    id: UUID
    email: str
    user_name: str
    first_name: str
    last_name: str
    phone: str | None
    is_active: bool
    email_confirmed: bool
    last_login_at: datetime | None
    created_at: datetime
    updated_at: datetime | None
    version: int

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class CreateUserDto:
    email: str
    user_name: str
    password_hash: str
    first_name: str
    last_name: str
    phone: str | None = None
    is_active: bool = True

    def validate(self) -> FieldErrors:
        errors: FieldErrors = []
        require_email(errors, "email", self.email)
        require_text(errors, "user_name", self.user_name, max_length=100)
        require_text(errors, "password_hash", self.password_hash)
        require_text(errors, "first_name", self.first_name, max_length=100)
        require_text(errors, "last_name", self.last_name, max_length=100)
        return errors


@dataclass(frozen=True, kw_only=True)
class UpdateUserDto:
    version: int
    email: str
    user_name: str
    first_name: str
    last_name: str
    phone: str | None = None
    is_active: bool = True
    email_confirmed: bool = False
    id: UUID | None = None

    def validate(self) -> FieldErrors:
        errors: FieldErrors = []
        require_email(errors, "email", self.email)
        require_text(errors, "user_name", self.user_name, max_length=100)
        require_text(errors, "first_name", self.first_name, max_length=100)
        require_text(errors, "last_name", self.last_name, max_length=100)
        return errors
