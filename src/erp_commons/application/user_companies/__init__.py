"""User companies – membership DTOs and cache-aside service."""
from erp_commons.application.user_companies.dtos import (
    CompanyRole,
    CreateUserCompanyDto,
    UpdateUserCompanyDto,
    UserCompanyDto,
)
from erp_commons.application.user_companies.service import UserCompanyService

__all__ = [
    "CompanyRole",
    "CreateUserCompanyDto",
    "UpdateUserCompanyDto",
    "UserCompanyDto",
    "UserCompanyService",
]
