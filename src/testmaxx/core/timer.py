"""
Countdown timer for a test session.

The timer does not read the wall clock. It counts down one second per tick
delivered by a ticker, so sessions can be driven deterministically in tests
(ManualTicker) or in real time (IntervalTicker).
"""
import logging
import threading
from typing import Callable, List, Optional

from src.testmaxx import config

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


class ManualTicker:
    """Ticker driven explicitly by calling tick()."""

    def __init__(self):
        self._callbacks: List[TickCallback] = []

    def on_tick(self, callback: TickCallback) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe():
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def tick(self, count: int = 1):
        """Deliver count ticks to every subscriber."""
        for _ in range(count):
            for callback in list(self._callbacks):
                callback()

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)


class IntervalTicker:
    """Ticker that fires from a background thread at a fixed interval."""

    def __init__(self, interval: Optional[float] = None):
        self.interval = interval or config.TICK_INTERVAL_SECONDS
        self._callbacks: List[TickCallback] = []
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def on_tick(self, callback: TickCallback) -> Unsubscribe:
        with self._lock:
            self._callbacks.append(callback)
            if self._thread is None:
                self._stop_event = threading.Event()
                self._thread = threading.Thread(
                    target=self._run,
                    args=(self._stop_event,),
                    name="testmaxx-ticker",
                    daemon=True
                )
                self._thread.start()

        def unsubscribe():
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)
                if not self._callbacks and self._stop_event is not None:
                    self._stop_event.set()
                    self._stop_event = None
                    self._thread = None

        return unsubscribe

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval):
            with self._lock:
                callbacks = list(self._callbacks)
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("Tick callback failed")


class CountdownTimer:
    """Counts down from a test's duration and fires on_expire once at zero."""

    def __init__(
        self,
        duration_minutes: int,
        ticker,
        on_expire: Optional[Callable[[], None]] = None
    ):
        """
        Args:
            duration_minutes: Time allowed for the test
            ticker: Object exposing on_tick(callback) -> unsubscribe
            on_expire: Called exactly once when the countdown reaches zero
        """
        self.total_seconds = duration_minutes * 60
        self.seconds_remaining = self.total_seconds
        self.ticker = ticker
        self.on_expire = on_expire
        self._unsubscribe: Optional[Unsubscribe] = None
        self._expired = False

    @property
    def is_running(self) -> bool:
        return self._unsubscribe is not None

    @property
    def has_expired(self) -> bool:
        return self._expired

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.seconds_remaining

    @property
    def is_running_low(self) -> bool:
        return self.seconds_remaining <= config.LOW_TIME_WARNING_SECONDS

    def start(self):
        if self.is_running or self._expired:
            return
        self._unsubscribe = self.ticker.on_tick(self._tick)

    def stop(self):
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _tick(self):
        if not self.is_running or self._expired:
            return

        self.seconds_remaining = max(self.seconds_remaining - 1, 0)
        if self.seconds_remaining > 0:
            return

        self._expired = True
        self.stop()
        logger.info("Countdown of %d seconds expired", self.total_seconds)
        if self.on_expire is not None:
            self.on_expire()

    def formatted(self) -> str:
        return format_clock(self.seconds_remaining)


def format_clock(seconds: int) -> str:
    """Render seconds as H:MM:SS when at least an hour, else M:SS."""
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
