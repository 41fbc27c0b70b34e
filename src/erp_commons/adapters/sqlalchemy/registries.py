"""SQLAlchemy adapter – per-entity filter/sort registries and search builders.

External names are the camelCase names used in query strings
(``filter[isActive]=true&sort=-createdAt``); lookups ignore case.
Some fields are filter-only (``id``, ``email``) or sort-only (``updatedAt``).
Only memberships expose relations to ``include=``.
"""
from __future__ import annotations

from typing import Any

from erp_commons.adapters.sqlalchemy.models import Company, User, UserCompany
from erp_commons.adapters.sqlalchemy.search import SqlAlchemySearchBuilder
from erp_commons.application.cache.aside import SearchFields
from erp_commons.application.search import FieldRegistry

COMPANY_FILTERS: FieldRegistry[Any] = FieldRegistry(
    {
        "id": Company.id,
        "name": Company.name,
        "code": Company.code,
        "email": Company.email,
        "city": Company.city,
        "country": Company.country,
        "industry": Company.industry,
        "currency": Company.currency,
        "isActive": Company.is_active,
        "createdAt": Company.created_at,
    },
    searchable=("name", "code", "email"),
)

COMPANY_SORTS: FieldRegistry[Any] = FieldRegistry({
    "name": Company.name,
    "code": Company.code,
    "city": Company.city,
    "country": Company.country,
    "industry": Company.industry,
    "isActive": Company.is_active,
    "createdAt": Company.created_at,
    "updatedAt": Company.updated_at,
})

USER_FILTERS: FieldRegistry[Any] = FieldRegistry(
    {
        "id": User.id,
        "email": User.email,
        "userName": User.user_name,
        "firstName": User.first_name,
        "lastName": User.last_name,
        "isActive": User.is_active,
        "emailConfirmed": User.email_confirmed,
        "lastLoginAt": User.last_login_at,
        "createdAt": User.created_at,
    },
    searchable=("email", "userName", "firstName", "lastName"),
)

USER_SORTS: FieldRegistry[Any] = FieldRegistry({
    "email": User.email,
    "userName": User.user_name,
    "firstName": User.first_name,
    "lastName": User.last_name,
    "isActive": User.is_active,
    "lastLoginAt": User.last_login_at,
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
})

USER_COMPANY_FILTERS: FieldRegistry[Any] = FieldRegistry({
    "id": UserCompany.id,
    "userId": UserCompany.user_id,
    "companyId": UserCompany.company_id,
    "role": UserCompany.role,
    "isDefaultCompany": UserCompany.is_default_company,
    "isActive": UserCompany.is_active,
    "joinedAt": UserCompany.joined_at,
    "leftAt": UserCompany.left_at,
    "createdAt": UserCompany.created_at,
})

USER_COMPANY_SORTS: FieldRegistry[Any] = FieldRegistry({
    "role": UserCompany.role,
    "isDefaultCompany": UserCompany.is_default_company,
    "isActive": UserCompany.is_active,
    "joinedAt": UserCompany.joined_at,
    "leftAt": UserCompany.left_at,
    "createdAt": UserCompany.created_at,
    "updatedAt": UserCompany.updated_at,
})

USER_COMPANY_INCLUDES: FieldRegistry[Any] = FieldRegistry({
    "user": UserCompany.user,
    "company": UserCompany.company,
})

COMPANY_SEARCH: SqlAlchemySearchBuilder[Company] = SqlAlchemySearchBuilder(
    COMPANY_FILTERS,
    COMPANY_SORTS,
    default_order_by=(Company.created_at.desc(),),
    tiebreaker=Company.id,
)
USER_SEARCH: SqlAlchemySearchBuilder[User] = SqlAlchemySearchBuilder(
    USER_FILTERS,
    USER_SORTS,
    default_order_by=(User.created_at.desc(),),
    tiebreaker=User.id,
)
USER_COMPANY_SEARCH: SqlAlchemySearchBuilder[UserCompany] = SqlAlchemySearchBuilder(
    USER_COMPANY_FILTERS,
    USER_COMPANY_SORTS,
    default_order_by=(UserCompany.created_at.desc(),),
    tiebreaker=UserCompany.id,
    includes=USER_COMPANY_INCLUDES,
)


def search_fields(builder: SqlAlchemySearchBuilder[Any]) -> SearchFields:
    """Allow-list view of *builder* for pruning requests before cache hashing."""
    return SearchFields(filterable=builder.filters, sortable=builder.sorts, includable=builder.includes)


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
    "search_fields",
]
