"""Chart feeds: the data sources behind the marks chart.

A feed keeps the latest list of records for the chart and exposes it as an
immutable `FeedState`. Two strategies exist, one per store backend:

- `PollingChartFeed` reads the full list on mount, then again on a fixed
  interval. `refresh()` performs one immediate read; the composition layer
  calls it after every successful submission so the chart does not wait for
  the next tick.
- `SubscriptionChartFeed` opens a live subscription on mount; every push
  replaces the list. An error ends live updates until the feed is mounted
  again.

Reads and pushes arrive on timer/SDK threads, so all state changes happen
under a lock and the last completed read wins.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final, Literal, Protocol

from scores.dto import ChartPoint, Record
from scores.records import chart_points
from stores.base import StoreAdapter, SubscribableStore, Unsubscribe
from stores.errors import RemoteError, StoreError

logger = logging.getLogger(__name__)

FeedStrategy = Literal["polling", "subscription"]

DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 5.0
LOAD_ERROR_MESSAGE: Final[str] = "Failed to load student data"
SUBSCRIPTION_ERROR_MESSAGE: Final[str] = "Live updates stopped. Reload the page to reconnect."


@dataclass(frozen=True, slots=True)
class FeedState:
    """Snapshot of a chart feed.

    Attributes:
        strategy: How the feed stays current.
        records: Latest records, in store order.
        loading: True until the first read or push completes.
        error: User-visible error from the most recent failure, if any.
    """

    strategy: FeedStrategy
    records: tuple[Record, ...] = ()
    loading: bool = True
    error: str | None = None

    def chart_points(self) -> tuple[ChartPoint, ...]:
        """Return the `{name, marks}` pairs to render."""

        return chart_points(self.records)


class Timer(Protocol):
    """A cancellable repeating timer."""

    def start(self) -> None:
        """Arm the timer."""

    def cancel(self) -> None:
        """Stop the timer; no further ticks fire."""


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class IntervalTimer:
    """Call `callback` every `interval` seconds on a daemon thread.

    Each tick re-arms a fresh `threading.Timer` after the callback returns, so
    a slow read delays the next tick instead of overlapping it.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self._interval = interval
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._cancelled = False

    def start(self) -> None:
        """Arm the first tick."""

        self._arm()

    def cancel(self) -> None:
        """Cancel the pending tick and prevent re-arming."""

        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            timer = threading.Timer(self._interval, self._tick)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _tick(self) -> None:
        try:
            self._callback()
        finally:
            self._arm()


class ChartFeed:
    """Base class holding the lock-protected feed state."""

    strategy: FeedStrategy

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._mount_lock = threading.Lock()
        self._records: tuple[Record, ...] = ()
        self._loading = True
        self._error: str | None = None

    def mount(self) -> None:
        """Start keeping the feed current."""

        raise NotImplementedError

    def unmount(self) -> None:
        """Stop timers or subscriptions."""

        raise NotImplementedError

    def refresh(self) -> None:
        """Re-read the record set after an application-level change."""

        raise NotImplementedError

    @property
    def mounted(self) -> bool:
        """Return True while the feed is live."""

        raise NotImplementedError

    def state(self) -> FeedState:
        """Return an immutable snapshot of the current state."""

        with self._lock:
            return FeedState(
                strategy=self.strategy,
                records=self._records,
                loading=self._loading,
                error=self._error,
            )

    def _replace_records(self, records: Sequence[Record]) -> None:
        with self._lock:
            self._records = tuple(records)
            self._loading = False
            self._error = None

    def _fail(self, message: str) -> None:
        with self._lock:
            self._loading = False
            self._error = message


class PollingChartFeed(ChartFeed):
    """Feed that re-reads the full record list on an interval."""

    strategy: FeedStrategy = "polling"

    def __init__(
        self,
        store: StoreAdapter,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timer_factory: TimerFactory = IntervalTimer,
    ) -> None:
        """Create an unmounted polling feed.

        Args:
            store: Store to read from.
            interval_seconds: Seconds between reads while mounted.
            timer_factory: Builds the repeating timer; replaced in tests.
        """

        super().__init__()
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._timer_factory = timer_factory
        self._timer: Timer | None = None

    @property
    def interval_seconds(self) -> float:
        """Return the polling interval."""

        return self._interval

    @property
    def mounted(self) -> bool:
        """Return True while the interval timer is armed."""

        return self._timer is not None

    def mount(self) -> None:
        """Read once and arm the interval timer; no-op when already mounted."""

        with self._mount_lock:
            if self._timer is not None:
                return
            self._timer = self._timer_factory(self._interval, self._poll)
            self._poll()
            self._timer.start()

    def unmount(self) -> None:
        """Cancel the interval timer."""

        with self._mount_lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def refresh(self) -> None:
        """Perform one immediate read."""

        self._poll()

    def _poll(self) -> None:
        try:
            records = self._store.list_records()
        except RemoteError as exc:
            logger.warning("Chart feed read failed: %s", exc)
            self._fail(LOAD_ERROR_MESSAGE)
            return
        self._replace_records(records)


class SubscriptionChartFeed(ChartFeed):
    """Feed kept current by a live store subscription."""

    strategy: FeedStrategy = "subscription"

    def __init__(self, store: SubscribableStore) -> None:
        """Create an unmounted subscription feed for `store`."""

        super().__init__()
        self._store = store
        self._unsubscribe: Unsubscribe | None = None
        self._terminated = False

    @property
    def mounted(self) -> bool:
        """Return True while a healthy subscription is open."""

        return self._unsubscribe is not None and not self._terminated

    def mount(self) -> None:
        """Open the subscription; re-opens one that ended in an error."""

        with self._mount_lock:
            if self.mounted:
                return
            self._close()
            with self._lock:
                self._terminated = False
            try:
                self._unsubscribe = self._store.subscribe(self._on_update, self._on_error)
            except StoreError as exc:
                self._on_error(exc)

    def unmount(self) -> None:
        """Close the subscription."""

        with self._mount_lock:
            self._close()

    def refresh(self) -> None:
        """Do nothing: the store pushes a new snapshot after every write."""

    def _close(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _on_update(self, records: Sequence[Record]) -> None:
        with self._lock:
            if self._terminated:
                return
            self._records = tuple(records)
            self._loading = False
            self._error = None

    def _on_error(self, error: StoreError) -> None:
        logger.error("Chart feed subscription failed: %s", error)
        with self._lock:
            self._terminated = True
            self._loading = False
            self._error = SUBSCRIPTION_ERROR_MESSAGE
