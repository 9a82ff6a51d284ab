"""Firestore store adapter.

Records live in one collection as `{name, marks, timestamp}` documents, with
`timestamp` set by the server on create. Reads and subscriptions are ordered
by `timestamp`, most recent first.

The SDK delivers snapshots on its own watch thread; callbacks passed to
`subscribe` run on that thread.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any, Final

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore

from scores.dto import Marks, Record
from scores.records import record_from_payload

from .base import CreatedRecord, ErrorCallback, UpdateCallback, Unsubscribe
from .config import StoreConfig
from .errors import RemoteError, SubscriptionError

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD: Final[str] = "timestamp"
SUBMIT_FAILED_MESSAGE: Final[str] = "Failed to submit data"
LOAD_FAILED_MESSAGE: Final[str] = "Failed to load student data"
SUBSCRIBE_FAILED_MESSAGE: Final[str] = "Live updates are unavailable"


def _default_client(config: StoreConfig) -> Any:
    """Build a Firestore client using Application Default Credentials."""

    kwargs: dict[str, str] = {}
    if config.firestore_project:
        kwargs["project"] = config.firestore_project
    if config.firestore_database:
        kwargs["database"] = config.firestore_database
    return firestore.Client(**kwargs)


class FirestoreStore:
    """Store adapter backed by a Firestore collection."""

    def __init__(self, config: StoreConfig, *, client: Any | None = None) -> None:
        """Bind the adapter to a collection.

        Args:
            config: Store configuration (collection, project, database).
            client: Optional pre-built client; defaults to a new `firestore.Client`.
        """

        self._client = client if client is not None else _default_client(config)
        self._collection_name = config.collection

    @property
    def collection_name(self) -> str:
        """Return the Firestore collection holding the records."""

        return self._collection_name

    def _ordered_query(self) -> Any:
        """Return the collection query ordered newest first."""

        return self._client.collection(self._collection_name).order_by(
            TIMESTAMP_FIELD,
            direction=firestore.Query.DESCENDING,
        )

    def create_record(self, name: str, marks: Marks) -> CreatedRecord:
        """Add a document stamped with the server timestamp."""

        try:
            _, reference = self._client.collection(self._collection_name).add(
                {"name": name, "marks": marks, TIMESTAMP_FIELD: firestore.SERVER_TIMESTAMP}
            )
        except GoogleAPIError as exc:
            logger.warning("Firestore add to %s failed: %s", self._collection_name, exc)
            raise RemoteError(SUBMIT_FAILED_MESSAGE) from exc

        logger.info("Stored record id=%s in %s", reference.id, self._collection_name)
        return CreatedRecord(
            record=Record(id=reference.id, name=name, marks=marks, created_at=datetime.now(UTC)),
        )

    def list_records(self) -> tuple[Record, ...]:
        """Read all documents once, newest first."""

        try:
            documents = list(self._ordered_query().stream())
        except GoogleAPIError as exc:
            logger.warning("Firestore read of %s failed: %s", self._collection_name, exc)
            raise RemoteError(LOAD_FAILED_MESSAGE) from exc

        try:
            return records_from_documents(documents)
        except ValueError as exc:
            logger.warning("Malformed document in %s: %s", self._collection_name, exc)
            raise RemoteError(LOAD_FAILED_MESSAGE) from exc

    def subscribe(self, on_update: UpdateCallback, on_error: ErrorCallback) -> Unsubscribe:
        """Open a live, newest-first subscription on the collection.

        Every snapshot is delivered in full to `on_update`. A snapshot that
        cannot be converted into records is reported once through `on_error`;
        the caller decides whether to keep listening.

        Raises:
            SubscriptionError: When the watch cannot be started.
        """

        def _on_snapshot(documents: Sequence[Any], _changes: Any, _read_time: Any) -> None:
            try:
                records = records_from_documents(documents)
            except ValueError as exc:
                logger.error("Discarding malformed snapshot from %s: %s", self._collection_name, exc)
                on_error(SubscriptionError(LOAD_FAILED_MESSAGE))
                return
            on_update(records)

        try:
            watch = self._ordered_query().on_snapshot(_on_snapshot)
        except GoogleAPIError as exc:
            logger.error("Firestore subscription to %s failed: %s", self._collection_name, exc)
            raise SubscriptionError(SUBSCRIBE_FAILED_MESSAGE) from exc

        logger.info("Subscribed to %s", self._collection_name)
        return watch.unsubscribe


def records_from_documents(documents: Iterable[Any]) -> tuple[Record, ...]:
    """Convert Firestore document snapshots into records.

    Raises:
        ValueError: When a document lacks a name or numeric marks.
    """

    return tuple(
        record_from_payload(document.to_dict() or {}, record_id=document.id)
        for document in documents
    )
