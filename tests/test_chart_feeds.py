"""Unit tests for the polling and subscription chart feeds."""

from __future__ import annotations

import threading
import time
from datetime import UTC, datetime, timedelta

import pytest

from core.feeds import (
    LOAD_ERROR_MESSAGE,
    SUBSCRIPTION_ERROR_MESSAGE,
    IntervalTimer,
    PollingChartFeed,
    SubscriptionChartFeed,
)
from scores.dto import Record
from stores.errors import RemoteError, SubscriptionError

pytestmark = pytest.mark.unit

_T0 = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


def _record(record_id: str, name: str, marks, minutes: int = 0) -> Record:
    return Record(id=record_id, name=name, marks=marks, created_at=_T0 + timedelta(minutes=minutes))


def test_polling_feed_starts_loading_until_first_read(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, interval_seconds=5.0, timer_factory=timers)

    assert feed.state().loading
    assert feed.state().strategy == "polling"

    feed.mount()

    state = feed.state()
    assert not state.loading
    assert state.records == ()
    assert state.error is None
    assert fake_store.list_calls == 1
    assert timers.last.interval == 5.0
    assert timers.last.started


def test_polling_feed_rereads_on_every_tick(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, interval_seconds=5.0, timer_factory=timers)
    feed.mount()

    fake_store.records.append(_record("1", "Ava", 87))
    timers.last.fire()

    assert [p.as_json() for p in feed.state().chart_points()] == [{"name": "Ava", "marks": 87}]
    assert fake_store.list_calls == 2


def test_polling_feed_mount_is_idempotent(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, timer_factory=timers)
    feed.mount()
    feed.mount()

    assert len(timers.timers) == 1
    assert fake_store.list_calls == 1
    assert feed.mounted


def test_polling_feed_error_keeps_previous_records(fake_store, timers) -> None:
    """A failed read shows the load error but keeps the last good data."""

    fake_store.records.append(_record("1", "Ava", 87))
    feed = PollingChartFeed(fake_store, timer_factory=timers)
    feed.mount()

    fake_store.list_error = RemoteError("boom")
    timers.last.fire()

    state = feed.state()
    assert state.error == LOAD_ERROR_MESSAGE
    assert [r.name for r in state.records] == ["Ava"]

    fake_store.list_error = None
    timers.last.fire()
    assert feed.state().error is None


def test_polling_feed_refresh_reads_immediately(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, timer_factory=timers)
    feed.mount()

    fake_store.records.append(_record("1", "Ava", 87))
    feed.refresh()

    assert [r.name for r in feed.state().records] == ["Ava"]


def test_polling_feed_unmount_cancels_timer(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, timer_factory=timers)
    feed.mount()
    timer = timers.last

    feed.unmount()

    assert timer.cancelled
    assert not feed.mounted


def test_polling_feed_rejects_non_positive_interval(fake_store) -> None:
    with pytest.raises(ValueError):
        PollingChartFeed(fake_store, interval_seconds=0)


def test_subscription_feed_receives_initial_and_pushed_snapshots(live_store) -> None:
    live_store.records.append(_record("1", "Ava", 87, minutes=0))
    feed = SubscriptionChartFeed(live_store)

    feed.mount()
    assert [r.name for r in feed.state().records] == ["Ava"]
    assert not feed.state().loading
    assert feed.state().strategy == "subscription"

    live_store.create_record("Bo", 150)

    assert [r.name for r in feed.state().records] == ["Bo", "Ava"]


def test_subscription_feed_error_stops_updates(live_store) -> None:
    """After an error, later pushes are ignored and the error message stays."""

    feed = SubscriptionChartFeed(live_store)
    feed.mount()

    live_store.fail(SubscriptionError("watch closed"))
    live_store.create_record("Late", 10)

    state = feed.state()
    assert state.error == SUBSCRIPTION_ERROR_MESSAGE
    assert state.records == ()
    assert not feed.mounted


def test_subscription_feed_remount_resubscribes_after_error(live_store) -> None:
    feed = SubscriptionChartFeed(live_store)
    feed.mount()
    live_store.fail(SubscriptionError("watch closed"))
    live_store.records.append(_record("1", "Ava", 87))

    feed.mount()

    assert live_store.unsubscribed == 1
    assert len(live_store.subscribers) == 1
    assert feed.state().error is None
    assert [r.name for r in feed.state().records] == ["Ava"]


def test_subscription_feed_start_failure_sets_error(live_store) -> None:
    live_store.subscribe_error = SubscriptionError("unavailable")
    feed = SubscriptionChartFeed(live_store)

    feed.mount()

    assert feed.state().error == SUBSCRIPTION_ERROR_MESSAGE
    assert not feed.state().loading
    assert not feed.mounted


def test_subscription_feed_unmount_closes_subscription(live_store) -> None:
    feed = SubscriptionChartFeed(live_store)
    feed.mount()
    feed.refresh()

    feed.unmount()

    assert live_store.unsubscribed == 1
    assert live_store.subscribers == []


def _slow_subscribe(store) -> None:
    """Make `store.subscribe` block long enough for mounts to race."""

    subscribe = store.subscribe

    def _subscribe(on_update, on_error):
        time.sleep(0.1)
        return subscribe(on_update, on_error)

    store.subscribe = _subscribe


def _mount_concurrently(feed, count: int = 2) -> None:
    threads = [threading.Thread(target=feed.mount) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)


def test_concurrent_subscription_mounts_open_one_subscription(live_store) -> None:
    """Racing mounts never leave an orphaned subscription behind."""

    _slow_subscribe(live_store)
    feed = SubscriptionChartFeed(live_store)

    _mount_concurrently(feed)
    assert len(live_store.subscribers) == 1

    feed.unmount()
    assert live_store.subscribers == []


def test_concurrent_polling_mounts_arm_one_timer(fake_store, timers) -> None:
    feed = PollingChartFeed(fake_store, timer_factory=timers)

    _mount_concurrently(feed, count=4)

    assert len(timers.timers) == 1
    assert fake_store.list_calls == 1


def test_interval_timer_ticks_until_cancelled_from_callback() -> None:
    """Ticks re-arm on a daemon thread; cancelling inside a tick stops re-arming."""

    ticks: list[bool] = []
    done = threading.Event()
    timer: IntervalTimer

    def _tick() -> None:
        ticks.append(threading.current_thread().daemon)
        if len(ticks) == 3:
            timer.cancel()
            done.set()

    timer = IntervalTimer(0.01, _tick)
    timer.start()

    assert done.wait(timeout=5)
    time.sleep(0.1)
    assert ticks == [True, True, True]
    assert timer._timer is None


def test_interval_timer_slow_callback_never_overlaps() -> None:
    """A callback slower than the interval delays the next tick instead."""

    active = 0
    peak = 0
    calls = 0
    lock = threading.Lock()
    done = threading.Event()
    timer: IntervalTimer

    def _tick() -> None:
        nonlocal active, peak, calls
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.03)
        with lock:
            active -= 1
            calls += 1
            if calls == 3:
                timer.cancel()
                done.set()

    timer = IntervalTimer(0.01, _tick)
    timer.start()

    assert done.wait(timeout=5)
    time.sleep(0.1)
    assert peak == 1
    assert calls == 3


def test_interval_timer_cancel_before_first_tick() -> None:
    ticks: list[int] = []
    timer = IntervalTimer(0.05, lambda: ticks.append(1))

    timer.start()
    timer.cancel()
    time.sleep(0.15)

    assert ticks == []
    assert timer._timer is None
