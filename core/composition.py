"""Page composition: one store, one chart feed, one refresh signal.

The dashboard is process-wide state built once from Django settings. Settings
are turned into an explicit `StoreConfig` and passed to the adapter
constructor; nothing below this module reads settings directly.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from django.conf import settings

from stores import StoreConfig, build_store, supports_subscription
from stores.base import StoreAdapter

from core.feeds import ChartFeed, IntervalTimer, PollingChartFeed, SubscriptionChartFeed, TimerFactory


@dataclass(slots=True)
class Dashboard:
    """The composed dashboard.

    Attributes:
        store: Store adapter shared by the form and the chart.
        feed: Chart data source.
        enforce_marks_range: Whether the form requires marks within 0..100.
        refresh_signal: Incremented after every successful submission.
    """

    store: StoreAdapter
    feed: ChartFeed
    enforce_marks_range: bool
    refresh_signal: int = 0
    _started: bool = field(default=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def open_feed(self, *, remount: bool) -> None:
        """Mount the chart feed.

        Args:
            remount: Mount again even after a previous start. A full page load
                passes True, which reconnects a subscription that ended in an
                error and re-reads an already running polling feed; data polls
                pass False so they never reconnect on their own.
        """

        with self._lock:
            if self._started and not remount:
                return
            already_started, self._started = self._started, True
        self.feed.mount()
        if already_started:
            self.feed.refresh()

    def record_created(self) -> int:
        """Signal that the record set changed and refresh the chart.

        Returns:
            The new refresh signal value.
        """

        with self._lock:
            self.refresh_signal += 1
            signal = self.refresh_signal
        self.feed.refresh()
        return signal

    @property
    def poll_interval_seconds(self) -> float | None:
        """Return the polling interval, or None for subscription feeds."""

        if isinstance(self.feed, PollingChartFeed):
            return self.feed.interval_seconds
        return None


def store_config_from_settings() -> StoreConfig:
    """Build the StoreConfig described by Django settings."""

    return StoreConfig(
        backend=settings.DASHBOARD_STORE_BACKEND,
        api_base_url=settings.DASHBOARD_API_BASE_URL,
        timeout_seconds=settings.DASHBOARD_API_TIMEOUT_SECONDS,
        collection=settings.FIRESTORE_COLLECTION,
        firestore_project=settings.FIRESTORE_PROJECT_ID,
        firestore_database=settings.FIRESTORE_DATABASE,
    )


def build_dashboard(
    store: StoreAdapter,
    *,
    enforce_marks_range: bool,
    poll_interval_seconds: float,
    timer_factory: TimerFactory = IntervalTimer,
) -> Dashboard:
    """Compose a dashboard around `store`.

    Stores that push live snapshots get a subscription feed; all others are
    polled every `poll_interval_seconds`.
    """

    feed: ChartFeed
    if supports_subscription(store):
        feed = SubscriptionChartFeed(store)
    else:
        feed = PollingChartFeed(store, interval_seconds=poll_interval_seconds, timer_factory=timer_factory)
    return Dashboard(store=store, feed=feed, enforce_marks_range=enforce_marks_range)


_dashboard: Dashboard | None = None
_dashboard_lock = threading.Lock()


def get_dashboard() -> Dashboard:
    """Return the process-wide dashboard, building it on first use."""

    global _dashboard
    with _dashboard_lock:
        if _dashboard is None:
            config = store_config_from_settings()
            _dashboard = build_dashboard(
                build_store(config),
                enforce_marks_range=config.enforces_marks_range,
                poll_interval_seconds=settings.DASHBOARD_POLL_INTERVAL_SECONDS,
            )
        return _dashboard


def install_dashboard(dashboard: Dashboard) -> None:
    """Replace the process-wide dashboard, unmounting the previous feed."""

    global _dashboard
    with _dashboard_lock:
        previous, _dashboard = _dashboard, dashboard
    if previous is not None and previous is not dashboard:
        previous.feed.unmount()


def reset_dashboard() -> None:
    """Drop the process-wide dashboard so the next call rebuilds it."""

    global _dashboard
    with _dashboard_lock:
        previous, _dashboard = _dashboard, None
    if previous is not None:
        previous.feed.unmount()
