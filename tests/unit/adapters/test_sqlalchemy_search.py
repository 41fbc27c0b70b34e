"""Unit tests for the SQLAlchemy search builder (SQLite in-memory via aiosqlite)."""

from __future__ import annotations

import asyncio
import datetime
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.pool import StaticPool

from erp_commons.adapters.sqlalchemy import (
    COMPANY_SEARCH,
    USER_COMPANY_SEARCH,
    Company,
    SqlAlchemySessionFactory,
    UserCompany,
    coerce_value,
)
from erp_commons.adapters.sqlalchemy.search import INVALID
from erp_commons.application.search import SearchRequest, parse_query_string
from erp_commons.application.user_companies import CompanyRole

_BASE = datetime.datetime(2024, 1, 1, 9, 0, tzinfo=datetime.UTC)


def _factory() -> SqlAlchemySessionFactory:
    return SqlAlchemySessionFactory("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)


def _company(n: int, *, is_active: bool = True, **overrides: Any) -> Company:
    values: dict[str, Any] = {
        "name": f"Company {n}",
        "code": f"C{n:03d}",
        "email": f"info@c{n}.example",
        "country": "PT",
        "currency": "EUR",
        "is_active": is_active,
        "created_at": _BASE + datetime.timedelta(minutes=n),
    }
    values.update(overrides)
    return Company(**values)


async def _seed(factory: SqlAlchemySessionFactory) -> None:
    await factory.create_schema()
    async with factory() as session:
        session.add_all([_company(n) for n in range(1, 6)])
        session.add(_company(6, is_active=False, name="Acme Dormant", country="BR", email=None))
        session.add(_company(7, is_active=False, name="ACME Holdings", country="ES"))
        await session.commit()


async def _search(factory: SqlAlchemySessionFactory, query: str) -> Any:
    async with factory() as session:
        return await COMPANY_SEARCH.execute(session, select(Company), parse_query_string(query))


# ---------------------------------------------------------------------------
# Filtering, ordering, paging
# ---------------------------------------------------------------------------


class TestSqlAlchemySearchBuilder:
    def test_active_newest_first_first_page(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(factory, "filter[isActive]=true&sort=-createdAt&page=1&pageSize=2")
            assert page.total_count == 5
            assert [c.code for c in page.items] == ["C005", "C004"]
            assert (page.page, page.page_size) == (1, 2)
            await factory.dispose()

        asyncio.run(run())

    def test_pages_cover_the_filtered_set_exactly_once(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            seen: list[str] = []
            for page_no in (1, 2, 3):
                page = await _search(factory, f"filter[isActive]=true&sort=country&pageSize=2&page={page_no}")
                seen.extend(c.code for c in page.items)
            assert sorted(seen) == ["C001", "C002", "C003", "C004", "C005"]
            assert len(seen) == len(set(seen))
            await factory.dispose()

        asyncio.run(run())

    def test_default_order_is_newest_first(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(factory, "")
            assert page.total_count == 7
            assert page.items[0].code == "C007"
            assert page.items[-1].code == "C001"
            await factory.dispose()

        asyncio.run(run())

    def test_unknown_fields_have_no_effect(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            baseline = await _search(factory, "filter[isActive]=true")
            probed = await _search(factory, "filter[isActive]=true&filter[passwordHash]=x&sort=secret")
            assert probed.total_count == baseline.total_count
            assert [c.id for c in probed.items] == [c.id for c in baseline.items]
            await factory.dispose()

        asyncio.run(run())

    def test_uncoercible_value_drops_clause(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            assert (await _search(factory, "filter[isActive]=maybe")).total_count == 7
            await factory.dispose()

        asyncio.run(run())

    def test_out_of_range_page_is_empty_with_total(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(factory, "filter[isActive]=true&page=9&pageSize=2")
            assert page.items == []
            assert page.total_count == 5
            assert page.page == 9
            await factory.dispose()

        asyncio.run(run())

    def test_contains_is_case_insensitive(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(factory, "filter[name][contains]=acme&sort=name")
            assert [c.name for c in page.items] == ["ACME Holdings", "Acme Dormant"]
            await factory.dispose()

        asyncio.run(run())

    def test_contains_escapes_wildcards(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            assert (await _search(factory, "filter[name][contains]=%25")).total_count == 0
            await factory.dispose()

        asyncio.run(run())

    def test_in_and_ne(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            assert (await _search(factory, "filter[country][in]=BR,ES")).total_count == 2
            assert (await _search(factory, "filter[country][ne]=PT")).total_count == 2
            await factory.dispose()

        asyncio.run(run())

    def test_null_literal(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(factory, "filter[email]=null")
            assert [c.code for c in page.items] == ["C006"]
            assert (await _search(factory, "filter[email][ne]=null")).total_count == 6
            await factory.dispose()

        asyncio.run(run())

    def test_date_range(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            page = await _search(
                factory,
                "filter[createdAt][gte]=2024-01-01T09:02:00%2B00:00&filter[createdAt][lt]=2024-01-01T09:04:00",
            )
            assert sorted(c.code for c in page.items) == ["C002", "C003"]
            await factory.dispose()

        asyncio.run(run())

    def test_free_text_term(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            assert (await _search(factory, "q=c00")).total_count == 7
            assert (await _search(factory, "q=holdings")).total_count == 1
            await factory.dispose()

        asyncio.run(run())

    def test_projection_and_include(self) -> None:
        async def run() -> None:
            factory = _factory()
            await _seed(factory)
            included: list[Any] = []

            def include(stmt: Any) -> Any:
                included.append(stmt)
                return stmt

            async with factory() as session:
                page = await COMPANY_SEARCH.execute(
                    session,
                    select(Company),
                    SearchRequest(page_size=3),
                    projection=lambda c: c.code,
                    include=include,
                )
            assert page.items == ["C007", "C006", "C005"]
            assert len(included) == 1
            await factory.dispose()

        asyncio.run(run())

    def test_load_options_follow_the_include_allow_list(self) -> None:
        request = parse_query_string("include=company,permissions,user")
        assert len(USER_COMPANY_SEARCH.load_options(request)) == 2
        assert COMPANY_SEARCH.load_options(request) == []


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


class TestCoerceValue:
    def test_bool(self) -> None:
        assert coerce_value(Company.is_active, "Yes") is True
        assert coerce_value(Company.is_active, "0") is False
        assert coerce_value(Company.is_active, "maybe") is INVALID

    def test_uuid(self) -> None:
        ident = uuid.uuid4()
        assert coerce_value(Company.id, str(ident)) == ident
        assert coerce_value(Company.id, "not-a-uuid") is INVALID

    def test_aware_datetime_is_normalised_to_utc(self) -> None:
        value = coerce_value(Company.created_at, "2024-01-01T02:00:00+02:00")
        assert value == datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.UTC)

    def test_enum_by_name_or_value(self) -> None:
        assert coerce_value(UserCompany.role, "ADMIN") is CompanyRole.ADMIN
        assert coerce_value(UserCompany.role, "viewer") is CompanyRole.VIEWER
        assert coerce_value(UserCompany.role, "emperor") is INVALID

    def test_string_is_untouched(self) -> None:
        assert coerce_value(Company.name, " Acme ") == " Acme "

    def test_role_filter_builds_predicate(self) -> None:
        predicate = USER_COMPANY_SEARCH.build_predicate(parse_query_string("filter[role]=owner"))
        assert predicate is not None
        assert USER_COMPANY_SEARCH.build_predicate(parse_query_string("filter[role]=emperor")) is None
