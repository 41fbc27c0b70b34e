"""SQLAlchemy ORM models – Company, User, UserCompany.

Every table carries a ``version`` column registered as the mapper's
``version_id_col``: SQLAlchemy increments it on each UPDATE and adds
``WHERE version = :old`` so a lost update surfaces as ``StaleDataError``.
"""
from __future__ import annotations

import datetime
import uuid
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    inspect,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from erp_commons.application.user_companies.dtos import CompanyRole
from erp_commons.kernel.time import utc_now


class Base(DeclarativeBase):
    pass


class EntityMixin:
    """Identity and audit timestamps shared by all ERP tables.

    ``created_at`` is indexed because it is the default search ordering.
    ``updated_at`` is set by the repository on every update.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )


class Company(EntityMixin, Base):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"Company(id={self.id!s}, code={self.code!r})"


class User(EntityMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"User(id={self.id!s}, user_name={self.user_name!r})"


class UserCompany(EntityMixin, Base):
    __tablename__ = "user_companies"
    __table_args__ = (UniqueConstraint("user_id", "company_id", name="uq_user_companies_user_company"),)

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("companies.id"), nullable=False, index=True)
    role: Mapped[CompanyRole] = mapped_column(
        Enum(CompanyRole, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=CompanyRole.MEMBER,
    )
    is_default_company: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    joined_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    left_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # loaded only on request (search ``include=``); lazy access raises
    user: Mapped[User] = relationship(lazy="raise")
    company: Mapped[Company] = relationship(lazy="raise")

    def _loaded(self, name: str) -> Any:
        if name in inspect(self).unloaded:
            return None
        return getattr(self, name)

    @property
    def user_name(self) -> str | None:
        user = self._loaded("user")
        return user.user_name if user is not None else None

    @property
    def company_name(self) -> str | None:
        company = self._loaded("company")
        return company.name if company is not None else None

    @property
    def company_code(self) -> str | None:
        company = self._loaded("company")
        return company.code if company is not None else None


__all__ = ["Base", "Company", "EntityMixin", "User", "UserCompany"]
