"""Unit tests for structured logging helpers."""

from __future__ import annotations

import io
import json
import logging

import structlog

from erp_commons.observability import (
    CorrelationContext,
    CorrelationProcessor,
    JsonLoggerFactory,
    RequestContext,
    SensitiveFieldsFilter,
    get_logger,
)


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------


class TestSensitiveFieldsFilter:
    def test_redacts_top_level_keys_case_insensitively(self) -> None:
        f = SensitiveFieldsFilter()
        out = f.redact_deep({"Password": "hunter2", "email": "a@b.c"})
        assert out == {"Password": SensitiveFieldsFilter.REDACTED, "email": "a@b.c"}

    def test_redacts_nested_dicts_and_lists(self) -> None:
        f = SensitiveFieldsFilter()
        out = f.redact_deep({
            "user": {"password_hash": "x", "name": "ann"},
            "rows": [{"token": "t"}, 3],
        })
        assert out["user"] == {"password_hash": "[REDACTED]", "name": "ann"}
        assert out["rows"] == [{"token": "[REDACTED]"}, 3]

    def test_custom_fields(self) -> None:
        f = SensitiveFieldsFilter(frozenset({"ssn"}))
        assert f.redact_deep({"ssn": "1", "password": "p"}) == {"ssn": "[REDACTED]", "password": "p"}

    def test_acts_as_processor(self) -> None:
        out = SensitiveFieldsFilter()(None, "info", {"event": "login", "secret": "s"})
        assert out == {"event": "login", "secret": "[REDACTED]"}


# ---------------------------------------------------------------------------
# CorrelationProcessor
# ---------------------------------------------------------------------------


class TestCorrelationProcessor:
    def teardown_method(self) -> None:
        CorrelationContext.clear()

    def test_no_context_leaves_event_untouched(self) -> None:
        CorrelationContext.clear()
        assert CorrelationProcessor()(None, "info", {"event": "x"}) == {"event": "x"}

    def test_injects_context_fields(self) -> None:
        CorrelationContext.set(RequestContext("cid-1", tenant_id="t1", user_id="u1"))
        out = CorrelationProcessor()(None, "info", {"event": "x"})
        assert out["correlation_id"] == "cid-1"
        assert out["tenant_id"] == "t1"
        assert out["user_id"] == "u1"

    def test_existing_keys_win(self) -> None:
        CorrelationContext.set(RequestContext("cid-1"))
        out = CorrelationProcessor()(None, "info", {"event": "x", "correlation_id": "explicit"})
        assert out["correlation_id"] == "explicit"


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    def test_emits_redacted_json_with_correlation(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        stream = io.StringIO()
        try:
            JsonLoggerFactory.configure(level=logging.DEBUG, handler=logging.StreamHandler(stream))
            CorrelationContext.set(RequestContext("cid-42"))
            get_logger("erp.test", component="search").info("company.created", password="p")
        finally:
            CorrelationContext.clear()
            structlog.reset_defaults()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "company.created"
        assert record["password"] == "[REDACTED]"
        assert record["correlation_id"] == "cid-42"
        assert record["component"] == "search"
        assert record["level"] == "info"
