"""Unit tests for in-process cache stores and the JSON cache codec."""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from erp_commons.application.cache import InMemoryCacheStore, JsonCacheCodec, KeyTrackingCacheStore
from erp_commons.application.companies import CompanyDto
from erp_commons.application.search import PageResult
from erp_commons.application.user_companies import CompanyRole, UserCompanyDto
from erp_commons.application.users import UserDto
from erp_commons.kernel.errors import SerializationError
from erp_commons.kernel.time import FrozenClock

_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def _company(name: str = "Acme") -> CompanyDto:
    return CompanyDto(
        id=uuid.uuid4(), name=name, code=name.upper(), email=None, phone=None, city="Lisbon",
        country="PT", industry=None, currency="EUR", is_active=True, created_at=_NOW,
        updated_at=None, version=1,
    )


class _DictOnlyStore:
    """Store without pattern deletion."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl: float | None = None) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


# ---------------------------------------------------------------------------
# InMemoryCacheStore
# ---------------------------------------------------------------------------


class TestInMemoryCacheStore:
    def test_round_trip(self) -> None:
        async def run() -> None:
            store = InMemoryCacheStore()
            await store.set("k", b"v", ttl=10)
            assert await store.get("k") == b"v"

        asyncio.run(run())

    def test_ttl_expiry(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = InMemoryCacheStore(clock)
            await store.set("k", b"v", ttl=300)
            clock.advance(seconds=299)
            assert await store.get("k") == b"v"
            clock.advance(seconds=1)
            assert await store.get("k") is None

        asyncio.run(run())

    def test_no_ttl_never_expires(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = InMemoryCacheStore(clock)
            await store.set("k", b"v")
            clock.advance(days=365)
            assert await store.get("k") == b"v"

        asyncio.run(run())

    def test_delete_pattern(self) -> None:
        async def run() -> None:
            store = InMemoryCacheStore()
            for key in ("company:search:a", "company:search:b", "company:id:1", "user:search:a"):
                await store.set(key, b"x")
            assert await store.delete_pattern("company:search:*") == 2
            assert store.keys() == ["company:id:1", "user:search:a"]

        asyncio.run(run())

    def test_keys_hides_expired(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = InMemoryCacheStore(clock)
            await store.set("a", b"1", ttl=5)
            await store.set("b", b"2", ttl=50)
            clock.advance(seconds=10)
            assert store.keys() == ["b"]

        asyncio.run(run())

    def test_sweep_purges_expired_entries_under_any_prefix(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = InMemoryCacheStore(clock)
            await store.set("user:id:1", b"x", ttl=5)
            await store.set("company:search:a", b"x", ttl=5)
            await store.set("company:id:1", b"x")
            clock.advance(seconds=10)
            assert store.size() == 3
            assert await store.delete_pattern("company:search:*") == 0
            assert store.size() == 1
            assert store.keys() == ["company:id:1"]

        asyncio.run(run())


# ---------------------------------------------------------------------------
# KeyTrackingCacheStore
# ---------------------------------------------------------------------------


class TestKeyTrackingCacheStore:
    def test_sweeps_issued_keys(self) -> None:
        async def run() -> None:
            inner = _DictOnlyStore()
            store = KeyTrackingCacheStore(inner)
            await store.set("user:search:1", b"x")
            await store.set("user:search:2", b"x")
            await store.set("user:id:1", b"x")
            assert await store.delete_pattern("user:search:*") == 2
            assert set(inner.data) == {"user:id:1"}
            assert store.tracked_keys == frozenset({"user:id:1"})

        asyncio.run(run())

    def test_delete_forgets_key(self) -> None:
        async def run() -> None:
            store = KeyTrackingCacheStore(_DictOnlyStore())
            await store.set("k", b"v")
            await store.delete("k")
            assert store.tracked_keys == frozenset()
            assert await store.get("k") is None

        asyncio.run(run())

    def test_expired_keys_are_forgotten_on_read(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = KeyTrackingCacheStore(InMemoryCacheStore(clock), clock)
            for i in range(1000):
                await store.set(f"company:id:{i}", b"x", ttl=1)
            clock.advance(seconds=10)
            for i in range(1000):
                assert await store.get(f"company:id:{i}") is None
            assert store.tracked_keys == frozenset()

        asyncio.run(run())

    def test_expired_keys_are_pruned_on_write(self) -> None:
        async def run() -> None:
            clock = FrozenClock()
            store = KeyTrackingCacheStore(_DictOnlyStore(), clock)
            await store.set("user:id:1", b"x", ttl=1)
            await store.set("user:id:2", b"x")
            clock.advance(seconds=10)
            await store.set("user:id:3", b"x", ttl=60)
            assert store.tracked_keys == frozenset({"user:id:2", "user:id:3"})

        asyncio.run(run())

    def test_read_miss_forgets_key(self) -> None:
        async def run() -> None:
            inner = _DictOnlyStore()
            store = KeyTrackingCacheStore(inner)
            await store.set("user:id:1", b"x")
            inner.data.clear()
            assert await store.get("user:id:1") is None
            assert store.tracked_keys == frozenset()

        asyncio.run(run())


# ---------------------------------------------------------------------------
# JsonCacheCodec
# ---------------------------------------------------------------------------


class TestJsonCacheCodec:
    def test_dto_round_trip(self) -> None:
        codec = JsonCacheCodec()
        dto = _company()
        assert codec.decode(codec.encode(dto), CompanyDto) == dto

    def test_page_of_dtos(self) -> None:
        codec = JsonCacheCodec()
        page = PageResult(items=[_company("Acme"), _company("Globex")], total_count=7, page=2, page_size=2)
        decoded = codec.decode(codec.encode(page), PageResult[CompanyDto])
        assert decoded == page
        assert isinstance(decoded.items[0], CompanyDto)
        assert decoded.items[0].created_at == _NOW

    def test_list_of_user_dtos(self) -> None:
        codec = JsonCacheCodec()
        users = [
            UserDto(
                id=uuid.uuid4(), email="ann@example.com", user_name="ann", first_name="Ann", last_name="Lee",
                phone=None, is_active=True, email_confirmed=False, last_login_at=None, created_at=_NOW,
                updated_at=_NOW, version=3,
            )
        ]
        decoded = codec.decode(codec.encode(users), list[UserDto])
        assert decoded == users
        assert decoded[0].full_name == "Ann Lee"

    def test_enum_field(self) -> None:
        codec = JsonCacheCodec()
        dto = UserCompanyDto(
            id=uuid.uuid4(), user_id=uuid.uuid4(), company_id=uuid.uuid4(), role=CompanyRole.ADMIN,
            is_default_company=True, is_active=True, joined_at=_NOW, left_at=None, created_at=_NOW,
            updated_at=None, version=1,
        )
        decoded = codec.decode(codec.encode(dto), UserCompanyDto)
        assert decoded.role is CompanyRole.ADMIN

    def test_decimal_and_set(self) -> None:
        codec = JsonCacheCodec()
        assert codec.decode(codec.encode(Decimal("1.50")), Decimal) == Decimal("1.50")
        assert codec.encode({"b", "a"}) == b'["a","b"]'

    def test_unencodable_value(self) -> None:
        with pytest.raises(SerializationError):
            JsonCacheCodec().encode(object())

    def test_corrupt_payload(self) -> None:
        with pytest.raises(SerializationError):
            JsonCacheCodec().decode(b"{not json", CompanyDto)

    def test_wrong_shape(self) -> None:
        with pytest.raises(SerializationError):
            JsonCacheCodec().decode(b"[1,2]", CompanyDto)

    @pytest.mark.parametrize(
        ("payload", "into"),
        [
            (b'{"x":1}', list[int]),
            (b"[1,2]", dict[str, int]),
            (b'"not-a-uuid"', uuid.UUID),
            (b"5", uuid.UUID),
        ],
    )
    def test_mismatched_types(self, payload: bytes, into: object) -> None:
        with pytest.raises(SerializationError):
            JsonCacheCodec().decode(payload, into)

    def test_non_string_uuid_field(self) -> None:
        codec = JsonCacheCodec()
        raw = json.loads(codec.encode(_company()))
        raw["id"] = 5
        with pytest.raises(SerializationError):
            codec.decode(json.dumps(raw), CompanyDto)
