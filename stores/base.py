"""Store adapter interface shared by the REST and Firestore backends."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeGuard, runtime_checkable

from scores.dto import Marks, Record

from .errors import StoreError

UpdateCallback = Callable[[Sequence[Record]], None]
ErrorCallback = Callable[[StoreError], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class CreatedRecord:
    """Outcome of a successful create.

    Attributes:
        record: The stored record as reported (or inferred) after the write.
        message: Optional user-facing confirmation supplied by the store.
    """

    record: Record
    message: str | None = None


class StoreAdapter(Protocol):
    """Capabilities every backing store provides."""

    def create_record(self, name: str, marks: Marks) -> CreatedRecord:
        """Persist a new record.

        Raises:
            RemoteError: When the store is unreachable or rejects the write.
        """

    def list_records(self) -> tuple[Record, ...]:
        """Return all records in store order.

        Raises:
            RemoteError: When the store is unreachable.
        """


@runtime_checkable
class SubscribableStore(StoreAdapter, Protocol):
    """A store that pushes full snapshots, newest first."""

    def subscribe(self, on_update: UpdateCallback, on_error: ErrorCallback) -> Unsubscribe:
        """Open a live subscription.

        Raises:
            SubscriptionError: When the channel cannot be opened.
        """


@runtime_checkable
class RankingStore(StoreAdapter, Protocol):
    """A store that can rank records by marks."""

    def top_performers(self, limit: int = 5) -> tuple[Record, ...]:
        """Return up to `limit` records with the highest marks."""


def supports_subscription(store: StoreAdapter) -> TypeGuard[SubscribableStore]:
    """Return True when the store offers live subscriptions."""

    return isinstance(store, SubscribableStore)


def supports_ranking(store: StoreAdapter) -> TypeGuard[RankingStore]:
    """Return True when the store can list top performers."""

    return isinstance(store, RankingStore)
