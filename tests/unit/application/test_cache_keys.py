"""Unit tests for the cache key factory."""

from __future__ import annotations

import uuid

import pytest

from erp_commons.application.cache import (
    COMPANY_KEYS,
    USER_COMPANY_KEYS,
    USER_KEYS,
    EntityCacheKeys,
    search_hash,
)
from erp_commons.application.search import SearchRequest, parse_query_string


class TestEntityCacheKeys:
    def test_identity_keys(self) -> None:
        ident = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert COMPANY_KEYS.by_id(ident) == "company:id:12345678-1234-5678-1234-567812345678"
        assert COMPANY_KEYS.by_field("code", "ACME") == "company:code:ACME"
        assert USER_KEYS.by_field("email", "ann@example.com") == "user:email:ann@example.com"

    def test_collection_keys(self) -> None:
        assert COMPANY_KEYS.all() == "company:all"
        assert COMPANY_KEYS.active() == "company:active"

    def test_patterns(self) -> None:
        assert USER_KEYS.search_pattern() == "user:search:*"
        assert USER_KEYS.pattern() == "user:*"

    def test_relation_keys(self) -> None:
        assert USER_COMPANY_KEYS.by_user("u") == "user-company:user:u"
        assert USER_COMPANY_KEYS.by_company("c") == "user-company:company:c"
        assert USER_COMPANY_KEYS.by_user_and_company("u", "c") == "user-company:pair:u:c"

    def test_search_key_shape(self) -> None:
        key = COMPANY_KEYS.search(SearchRequest())
        prefix, digest = key.rsplit(":", 1)
        assert prefix == "company:search"
        assert len(digest) == 16
        int(digest, 16)

    def test_entity_key_spaces_do_not_overlap(self) -> None:
        request = SearchRequest()
        assert COMPANY_KEYS.search(request) != USER_KEYS.search(request)
        assert not USER_COMPANY_KEYS.all().startswith(USER_KEYS.pattern()[:-1])

    @pytest.mark.parametrize("name", ["", "a:b", "a*"])
    def test_invalid_entity_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            EntityCacheKeys(name)


class TestSearchHash:
    def test_is_deterministic(self) -> None:
        a = parse_query_string("filter[name]=x&page=2")
        b = parse_query_string("page=2&filter[name]=x")
        assert search_hash(a) == search_hash(b)

    def test_page_changes_hash(self) -> None:
        req = parse_query_string("filter[name]=x")
        assert search_hash(req) != search_hash(req.with_page(2))

    def test_value_changes_hash(self) -> None:
        assert search_hash(parse_query_string("filter[name]=x")) != search_hash(parse_query_string("filter[name]=y"))
