"""Kernel DDD – repository and unit-of-work ports."""
from erp_commons.kernel.ddd.repository import EntityRepository
from erp_commons.kernel.ddd.unit_of_work import UnitOfWork

__all__ = ["EntityRepository", "UnitOfWork"]
