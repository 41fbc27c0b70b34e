"""Unit tests for kernel clocks."""

from __future__ import annotations

from datetime import UTC, datetime

from erp_commons.kernel.time import FrozenClock, SystemClock, utc_now


class TestClocks:
    def test_system_clock_is_utc(self) -> None:
        assert SystemClock().now().tzinfo is UTC

    def test_utc_now_is_aware(self) -> None:
        assert utc_now().tzinfo is not None

    def test_frozen_clock_advance(self) -> None:
        clock = FrozenClock(datetime(2024, 5, 1, tzinfo=UTC))
        start = clock.monotonic()
        clock.advance(seconds=90)
        assert clock.monotonic() - start == 90
        assert clock.now() == datetime(2024, 5, 1, 0, 1, 30, tzinfo=UTC)
