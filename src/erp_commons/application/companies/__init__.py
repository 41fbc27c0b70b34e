"""Companies – DTOs and cache-aside service."""
from erp_commons.application.companies.dtos import CompanyDto, CreateCompanyDto, UpdateCompanyDto
from erp_commons.application.companies.service import CompanyService

__all__ = ["CompanyDto", "CompanyService", "CreateCompanyDto", "UpdateCompanyDto"]
