"""Service-layer functions for the dashboard.

Services coordinate the pure validation in `scores` with a store adapter and
convert every failure into a user-visible outcome; nothing raised by a store
escapes to the view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Literal

from scores.dto import Record, Submission
from scores.validation import ValidationError, validate_submission
from stores.base import StoreAdapter, supports_ranking
from stores.errors import RemoteError

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE: Final[str] = "Data stored successfully"
SUBMIT_FAILED_MESSAGE: Final[str] = "Failed to submit data"

FailureKind = Literal["validation", "remote"]


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Result of a submission attempt.

    Attributes:
        message: Confirmation text on success, else None.
        error: User-visible error on failure, else None.
        failure: Which stage failed, when one did.
        record: The stored record on success.
    """

    message: str | None = None
    error: str | None = None
    failure: FailureKind | None = None
    record: Record | None = None

    @property
    def ok(self) -> bool:
        """Return True when the record was stored."""

        return self.failure is None


def store_submission(store: StoreAdapter, submission: Submission) -> SubmissionOutcome:
    """Create a record for an already-validated submission.

    Args:
        store: Store adapter to write to.
        submission: Validated name + marks.

    Returns:
        A successful outcome with the store's message (or the default one), or
        a remote failure carrying the store's error text.
    """

    try:
        created = store.create_record(submission.name, submission.marks)
    except RemoteError as exc:
        logger.warning("Submission for %r failed: %s", submission.name, exc)
        return SubmissionOutcome(error=str(exc) or SUBMIT_FAILED_MESSAGE, failure="remote")
    return SubmissionOutcome(message=created.message or SUCCESS_MESSAGE, record=created.record)


def submit_record(
    store: StoreAdapter,
    *,
    name: str | None,
    marks_text: str | None,
    enforce_range: bool,
) -> SubmissionOutcome:
    """Validate raw form values and store them.

    Invalid input never reaches the store.

    Args:
        store: Store adapter to write to.
        name: Candidate name as entered.
        marks_text: Marks as entered.
        enforce_range: Require marks within 0..100 (REST backend).

    Returns:
        The submission outcome.
    """

    try:
        submission = validate_submission(name, marks_text, enforce_range=enforce_range)
    except ValidationError as exc:
        return SubmissionOutcome(error=str(exc), failure="validation")
    return store_submission(store, submission)


def top_performers(store: StoreAdapter, *, limit: int = 5) -> tuple[tuple[Record, ...], str | None]:
    """Return the store's top performers and an optional error message.

    Stores that cannot rank records return an empty tuple without an error.
    """

    if not supports_ranking(store):
        return (), None
    try:
        return store.top_performers(limit), None
    except RemoteError as exc:
        logger.warning("Top performers read failed: %s", exc)
        return (), str(exc)
