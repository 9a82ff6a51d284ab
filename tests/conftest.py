"""Pytest fixtures shared across unit and Django integration tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import UTC, datetime, timedelta

import pytest

from core.composition import Dashboard, build_dashboard, install_dashboard, reset_dashboard
from scores.dto import Marks, Record
from stores.base import CreatedRecord, ErrorCallback, UpdateCallback, Unsubscribe
from stores.errors import RemoteError, StoreError

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


class FakeStore:
    """In-memory pull-based store recording every create call."""

    def __init__(self, records: Sequence[Record] = (), *, message: str | None = None) -> None:
        self.records: list[Record] = list(records)
        self.create_calls: list[tuple[str, Marks]] = []
        self.list_calls = 0
        self.message = message
        self.create_error: RemoteError | None = None
        self.list_error: RemoteError | None = None

    def create_record(self, name: str, marks: Marks) -> CreatedRecord:
        self.create_calls.append((name, marks))
        if self.create_error is not None:
            raise self.create_error
        record = Record(
            id=str(len(self.records) + 1),
            name=name,
            marks=marks,
            created_at=BASE_TIME + timedelta(minutes=len(self.records)),
        )
        self.records.append(record)
        return CreatedRecord(record=record, message=self.message)

    def list_records(self) -> tuple[Record, ...]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return tuple(self.records)


class FakeRankingStore(FakeStore):
    """FakeStore that can also rank records by marks."""

    def top_performers(self, limit: int = 5) -> tuple[Record, ...]:
        if self.list_error is not None:
            raise self.list_error
        return tuple(sorted(self.records, key=lambda r: r.marks, reverse=True)[:limit])


class FakeLiveStore(FakeStore):
    """FakeStore that pushes newest-first snapshots to subscribers after every create."""

    def __init__(self, records: Sequence[Record] = (), **kwargs) -> None:
        super().__init__(records, **kwargs)
        self.subscribers: list[tuple[UpdateCallback, ErrorCallback]] = []
        self.unsubscribed = 0
        self.subscribe_error: StoreError | None = None

    def subscribe(self, on_update: UpdateCallback, on_error: ErrorCallback) -> Unsubscribe:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        entry = (on_update, on_error)
        self.subscribers.append(entry)
        on_update(self.snapshot())

        def _unsubscribe() -> None:
            self.unsubscribed += 1
            if entry in self.subscribers:
                self.subscribers.remove(entry)

        return _unsubscribe

    def create_record(self, name: str, marks: Marks) -> CreatedRecord:
        created = super().create_record(name, marks)
        self.push()
        return created

    def snapshot(self) -> tuple[Record, ...]:
        return tuple(sorted(self.records, key=lambda r: r.created_at, reverse=True))  # type: ignore[arg-type, return-value]

    def push(self) -> None:
        for on_update, _ in list(self.subscribers):
            on_update(self.snapshot())

    def fail(self, error: StoreError) -> None:
        for _, on_error in list(self.subscribers):
            on_error(error)


class ManualTimer:
    """Timer stand-in that only fires when the test says so."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        assert self.started and not self.cancelled
        self.callback()


class TimerRecorder:
    """Timer factory that keeps every ManualTimer it builds."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


def make_record(record_id: str, name: str, marks: Marks, *, minutes: int = 0) -> Record:
    """Return a Record created `minutes` after the shared base time."""

    return Record(id=record_id, name=name, marks=marks, created_at=BASE_TIME + timedelta(minutes=minutes))


@pytest.fixture
def fake_store() -> FakeRankingStore:
    """Return an empty in-memory REST-like store."""

    return FakeRankingStore()


@pytest.fixture
def live_store() -> FakeLiveStore:
    """Return an empty in-memory store with live subscriptions."""

    return FakeLiveStore()


@pytest.fixture
def timers() -> TimerRecorder:
    """Return a timer factory producing manually fired timers."""

    return TimerRecorder()


@pytest.fixture
def polling_dashboard(fake_store, timers) -> Iterator[Dashboard]:
    """Install a polling dashboard over `fake_store` for the test duration."""

    dashboard = build_dashboard(
        fake_store,
        enforce_marks_range=True,
        poll_interval_seconds=5.0,
        timer_factory=timers,
    )
    install_dashboard(dashboard)
    yield dashboard
    reset_dashboard()


@pytest.fixture
def live_dashboard(live_store) -> Iterator[Dashboard]:
    """Install a subscription dashboard over `live_store` for the test duration."""

    dashboard = build_dashboard(live_store, enforce_marks_range=False, poll_interval_seconds=5.0)
    install_dashboard(dashboard)
    yield dashboard
    reset_dashboard()


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
