"""SQLAlchemy adapter – SqlAlchemyUnitOfWork."""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from erp_commons.adapters.sqlalchemy.errors import translate_errors
from erp_commons.adapters.sqlalchemy.models import Company, User, UserCompany
from erp_commons.adapters.sqlalchemy.registries import COMPANY_SEARCH, USER_COMPANY_SEARCH, USER_SEARCH
from erp_commons.adapters.sqlalchemy.repository import SqlAlchemyEntityRepository
from erp_commons.kernel.ddd import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """One session per unit of work; commit on clean exit, rollback on error."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._factory = session_factory
        self.session: Any = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self._factory()
        self.companies = SqlAlchemyEntityRepository(self.session, Company, COMPANY_SEARCH)
        self.users = SqlAlchemyEntityRepository(self.session, User, USER_SEARCH)
        self.user_companies = SqlAlchemyEntityRepository(self.session, UserCompany, USER_COMPANY_SEARCH)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.session.close()

    async def commit(self) -> None:
        with translate_errors("unit_of_work"):
            await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


__all__ = ["SqlAlchemyUnitOfWork"]
