"""SQLAlchemy adapter – models, search builder, repositories, UoW and wiring."""
from erp_commons.adapters.sqlalchemy.errors import translate_errors
from erp_commons.adapters.sqlalchemy.models import Base, Company, User, UserCompany
from erp_commons.adapters.sqlalchemy.registries import (
    COMPANY_FILTERS,
    COMPANY_SEARCH,
    COMPANY_SORTS,
    USER_COMPANY_FILTERS,
    USER_COMPANY_INCLUDES,
    USER_COMPANY_SEARCH,
    USER_COMPANY_SORTS,
    USER_FILTERS,
    USER_SEARCH,
    USER_SORTS,
)
from erp_commons.adapters.sqlalchemy.repository import SqlAlchemyEntityRepository
from erp_commons.adapters.sqlalchemy.search import SqlAlchemySearchBuilder, coerce_value
from erp_commons.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from erp_commons.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from erp_commons.adapters.sqlalchemy.wiring import ErpServices, build_services

__all__ = [
    "COMPANY_FILTERS",
    "COMPANY_SEARCH",
    "COMPANY_SORTS",
    "USER_COMPANY_FILTERS",
    "USER_COMPANY_INCLUDES",
    "USER_COMPANY_SEARCH",
    "USER_COMPANY_SORTS",
    "USER_FILTERS",
    "USER_SEARCH",
    "USER_SORTS",
    "Base",
    "Company",
    "ErpServices",
    "SqlAlchemyEntityRepository",
    "SqlAlchemySearchBuilder",
    "SqlAlchemySessionFactory",
    "SqlAlchemyUnitOfWork",
    "User",
    "UserCompany",
    "build_services",
    "coerce_value",
    "translate_errors",
]
