"""
Unit tests for the countdown timer (timer.py).

Tests cover:
- Countdown driven by a manual ticker
- Single expiry callback
- Stopping and unsubscribing
- Clock formatting
- Real-time interval ticker
"""
import threading
from unittest.mock import Mock

import pytest

from src.testmaxx.core.timer import (
    CountdownTimer,
    IntervalTicker,
    ManualTicker,
    format_clock,
)


# ============================================================================
# MANUAL TICKER TESTS
# ============================================================================

@pytest.mark.unit
class TestManualTicker:
    """Test the manual ticker."""

    def test_tick_calls_subscribers(self):
        ticker = ManualTicker()
        callback = Mock()
        ticker.on_tick(callback)

        ticker.tick(3)

        assert callback.call_count == 3

    def test_unsubscribe(self):
        ticker = ManualTicker()
        callback = Mock()
        unsubscribe = ticker.on_tick(callback)

        unsubscribe()
        ticker.tick()

        callback.assert_not_called()
        assert ticker.subscriber_count == 0

    def test_unsubscribe_twice_is_safe(self):
        ticker = ManualTicker()
        unsubscribe = ticker.on_tick(Mock())

        unsubscribe()
        unsubscribe()

        assert ticker.subscriber_count == 0


# ============================================================================
# COUNTDOWN TESTS
# ============================================================================

@pytest.mark.unit
class TestCountdownTimer:
    """Test the countdown timer."""

    def test_starts_at_duration(self):
        timer = CountdownTimer(30, ManualTicker())

        assert timer.seconds_remaining == 1800
        assert timer.elapsed_seconds == 0
        assert timer.is_running is False

    def test_counts_down_one_second_per_tick(self):
        ticker = ManualTicker()
        timer = CountdownTimer(5, ticker)
        timer.start()

        ticker.tick(10)

        assert timer.seconds_remaining == 290
        assert timer.elapsed_seconds == 10

    def test_no_countdown_before_start(self):
        ticker = ManualTicker()
        timer = CountdownTimer(5, ticker)

        ticker.tick(10)

        assert timer.seconds_remaining == 300

    def test_expiry_fires_once(self):
        """Test that on_expire runs exactly once even with extra ticks."""
        ticker = ManualTicker()
        on_expire = Mock()
        timer = CountdownTimer(5, ticker, on_expire=on_expire)
        timer.start()

        ticker.tick(300)
        ticker.tick(5)

        on_expire.assert_called_once()
        assert timer.seconds_remaining == 0
        assert timer.has_expired is True
        assert timer.is_running is False
        assert ticker.subscriber_count == 0

    def test_stop_halts_countdown(self):
        ticker = ManualTicker()
        on_expire = Mock()
        timer = CountdownTimer(5, ticker, on_expire=on_expire)
        timer.start()

        ticker.tick(100)
        timer.stop()
        ticker.tick(500)

        assert timer.seconds_remaining == 200
        on_expire.assert_not_called()

    def test_start_twice_subscribes_once(self):
        ticker = ManualTicker()
        timer = CountdownTimer(5, ticker)
        timer.start()
        timer.start()

        ticker.tick()

        assert ticker.subscriber_count == 1
        assert timer.seconds_remaining == 299

    def test_cannot_restart_after_expiry(self):
        ticker = ManualTicker()
        timer = CountdownTimer(5, ticker)
        timer.start()
        ticker.tick(300)

        timer.start()

        assert timer.is_running is False

    def test_running_low(self):
        """Test the five-minute warning."""
        ticker = ManualTicker()
        timer = CountdownTimer(10, ticker)
        timer.start()

        ticker.tick(299)
        assert timer.is_running_low is False

        ticker.tick()
        assert timer.is_running_low is True
        assert timer.formatted() == "5:00"


# ============================================================================
# FORMAT TESTS
# ============================================================================

@pytest.mark.unit
class TestFormatClock:
    """Test clock formatting."""

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"),
        (59, "0:59"),
        (61, "1:01"),
        (1800, "30:00"),
        (3600, "1:00:00"),
        (3725, "1:02:05"),
        (-4, "0:00"),
    ])
    def test_format_clock(self, seconds, expected):
        assert format_clock(seconds) == expected


# ============================================================================
# INTERVAL TICKER TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.slow
class TestIntervalTicker:
    """Test the real-time ticker."""

    def test_ticks_from_background_thread(self):
        ticker = IntervalTicker(interval=0.01)
        ticked = threading.Event()
        unsubscribe = ticker.on_tick(ticked.set)

        try:
            assert ticked.wait(timeout=2.0)
        finally:
            unsubscribe()

    def test_countdown_expires_in_real_time(self):
        """Test that a short countdown expires when driven by the interval ticker."""
        ticker = IntervalTicker(interval=0.001)
        expired = threading.Event()
        timer = CountdownTimer(5, ticker, on_expire=expired.set)
        timer.start()

        assert expired.wait(timeout=10.0)
        assert timer.seconds_remaining == 0

    def test_callback_errors_do_not_stop_ticking(self):
        ticker = IntervalTicker(interval=0.01)
        calls = []
        ticked_twice = threading.Event()

        def flaky():
            calls.append(1)
            if len(calls) >= 2:
                ticked_twice.set()
            raise RuntimeError("boom")

        unsubscribe = ticker.on_tick(flaky)
        try:
            assert ticked_twice.wait(timeout=2.0)
        finally:
            unsubscribe()
