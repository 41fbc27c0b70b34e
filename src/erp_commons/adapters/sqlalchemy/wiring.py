"""SQLAlchemy adapter – wire the cache-aside services to a database."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from erp_commons.adapters.sqlalchemy.registries import (
    COMPANY_SEARCH,
    USER_COMPANY_SEARCH,
    USER_SEARCH,
    search_fields,
)
from erp_commons.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from erp_commons.application.cache import CacheService, CacheTtl
from erp_commons.application.companies import CompanyService
from erp_commons.application.user_companies import UserCompanyService
from erp_commons.application.users import UserService


@dataclass(frozen=True)
class ErpServices:
    companies: CompanyService
    users: UserService
    user_companies: UserCompanyService


def build_services(
    session_factory: Callable[[], AsyncSession],
    cache: CacheService,
    ttl: CacheTtl | None = None,
) -> ErpServices:
    """Build the three entity services over one session factory and one cache."""

    def uow_factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return ErpServices(
        companies=CompanyService(uow_factory, cache, ttl=ttl, search_fields=search_fields(COMPANY_SEARCH)),
        users=UserService(uow_factory, cache, ttl=ttl, search_fields=search_fields(USER_SEARCH)),
        user_companies=UserCompanyService(
            uow_factory,
            cache,
            ttl=ttl,
            search_fields=search_fields(USER_COMPANY_SEARCH),
        ),
    )


__all__ = ["ErpServices", "build_services"]
