"""Application cache – per-entity cache key factory."""
from __future__ import annotations

import hashlib
import json
from typing import Any
from uuid import UUID

from erp_commons.application.search import SearchRequest

__all__ = [
    "COMPANY_KEYS",
    "USER_COMPANY_KEYS",
    "USER_KEYS",
    "EntityCacheKeys",
    "search_hash",
]

SEARCH_HASH_LENGTH = 16


def search_hash(request: SearchRequest) -> str:
    """First 16 hex chars of SHA-256 over the request's canonical JSON."""
    canonical = json.dumps(request.canonical(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:SEARCH_HASH_LENGTH]


class EntityCacheKeys:
    """Deterministic cache keys and invalidation patterns for one entity type.

    Every key starts with ``"{entity}:"`` so :meth:`pattern` covers the whole
    key space of the entity and nothing else.
    """

    def __init__(self, entity: str) -> None:
        if not entity or ":" in entity or "*" in entity:
            raise ValueError(f"Invalid cache entity name: {entity!r}")
        self.entity = entity

    def __repr__(self) -> str:
        return f"EntityCacheKeys({self.entity!r})"

    def by_id(self, id: UUID | str) -> str:
        return f"{self.entity}:id:{id}"

    def by_field(self, field: str, value: Any) -> str:
        """Key for a unique natural key such as ``code`` or ``email``."""
        return f"{self.entity}:{field}:{value}"

    def all(self) -> str:
        return f"{self.entity}:all"

    def active(self) -> str:
        return f"{self.entity}:active"

    def search(self, request: SearchRequest) -> str:
        return f"{self.entity}:search:{search_hash(request)}"

    def search_pattern(self) -> str:
        return f"{self.entity}:search:*"

    def pattern(self) -> str:
        return f"{self.entity}:*"

    # user-company relation lists

    def by_user(self, user_id: UUID | str) -> str:
        return f"{self.entity}:user:{user_id}"

    def by_company(self, company_id: UUID | str) -> str:
        return f"{self.entity}:company:{company_id}"

    def by_user_and_company(self, user_id: UUID | str, company_id: UUID | str) -> str:
        return f"{self.entity}:pair:{user_id}:{company_id}"


COMPANY_KEYS = EntityCacheKeys("company")
USER_KEYS = EntityCacheKeys("user")
USER_COMPANY_KEYS = EntityCacheKeys("user-company")
