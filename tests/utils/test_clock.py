"""
Tests for the repository timestamp source.
"""

from datetime import datetime, timedelta, timezone

import pytest

from quicknotes.utils import MonotonicClock, utc_now

FROZEN = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestMonotonicClock:
    """Tests for MonotonicClock."""

    def test_utc_now_is_timezone_aware(self):
        """utc_now returns an aware UTC datetime."""
        assert utc_now().tzinfo == timezone.utc

    def test_frozen_source_still_increases(self):
        """Repeated calls on a stalled source bump by one microsecond."""
        clock = MonotonicClock(source=lambda: FROZEN)

        first, second, third = clock.now(), clock.now(), clock.now()

        assert first == FROZEN
        assert second == FROZEN + timedelta(microseconds=1)
        assert third == FROZEN + timedelta(microseconds=2)

    def test_backwards_source_never_decreases(self):
        """A source stepping backwards is ignored."""
        values = iter([FROZEN, FROZEN - timedelta(seconds=5)])
        clock = MonotonicClock(source=lambda: next(values))

        first = clock.now()
        second = clock.now()

        assert second > first

    def test_advancing_source_passes_through(self):
        """When the source moves forward its value is used unchanged."""
        later = FROZEN + timedelta(seconds=1)
        values = iter([FROZEN, later])
        clock = MonotonicClock(source=lambda: next(values))

        clock.now()
        assert clock.now() == later
