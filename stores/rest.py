"""REST store adapter.

Talks to the students API (`GET/POST {base}/students`,
`GET {base}/top-performers`). Every call is a single attempt; failures are
reported as `RemoteError` with a message suitable for display.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Mapping
from typing import Any, Final
from urllib.parse import urlencode

from scores.dto import Marks, Record
from scores.records import record_from_payload

from .base import CreatedRecord
from .config import StoreConfig
from .errors import RemoteError

logger = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE: Final[str] = "Failed to submit data"
LOAD_FAILED_MESSAGE: Final[str] = "Failed to load student data"
USER_AGENT: Final[str] = "marksDashboard/1.0 (rest store)"


class RestStore:
    """Store adapter backed by the students REST API."""

    def __init__(self, config: StoreConfig) -> None:
        """Bind the adapter to a base URL and timeout from `config`."""

        self._base_url = config.api_base_url.rstrip("/")
        self._timeout = config.timeout_seconds

    @property
    def base_url(self) -> str:
        """Return the API base URL without a trailing slash."""

        return self._base_url

    def create_record(self, name: str, marks: Marks) -> CreatedRecord:
        """POST a new record and return it with the API's message."""

        body = self._request(
            "POST",
            "/students",
            payload={"name": name, "marks": marks},
            failure_message=SUBMIT_FAILED_MESSAGE,
        )
        if not body.get("success"):
            raise RemoteError(_error_text(body) or SUBMIT_FAILED_MESSAGE)

        data = body.get("data")
        record = _created_record(data, name=name, marks=marks)
        message = body.get("message")
        logger.info("Stored record id=%s via %s", record.id or "?", self._base_url)
        return CreatedRecord(record=record, message=message if isinstance(message, str) and message else None)

    def list_records(self) -> tuple[Record, ...]:
        """GET all records; an unsuccessful body reads as an empty list."""

        body = self._request("GET", "/students", failure_message=LOAD_FAILED_MESSAGE)
        return _records_from_body(body)

    def top_performers(self, limit: int = 5) -> tuple[Record, ...]:
        """GET the `limit` highest-scoring records."""

        query = urlencode({"limit": int(limit)})
        body = self._request("GET", f"/top-performers?{query}", failure_message=LOAD_FAILED_MESSAGE)
        return _records_from_body(body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Mapping[str, object] | None = None,
        failure_message: str,
    ) -> dict[str, Any]:
        """Perform one JSON request and return the decoded object body.

        Raises:
            RemoteError: On transport errors, HTTP errors, or non-object bodies.
        """

        url = f"{self._base_url}{path}"
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        request = urllib.request.Request(url, data=data, headers=headers, method=method)

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            detail = _error_text(_decode_body(exc.read()))
            logger.warning("%s %s failed with HTTP %s: %s", method, url, exc.code, detail or exc.reason)
            raise RemoteError(detail or failure_message) from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteError(failure_message) from exc

        body = _decode_body(raw)
        if body is None:
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise RemoteError(failure_message)
        return body


def _decode_body(raw: bytes) -> dict[str, Any] | None:
    """Decode a JSON object body, returning None for anything else."""

    try:
        decoded = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return decoded if isinstance(decoded, dict) else None


def _error_text(body: Mapping[str, Any] | None) -> str | None:
    """Return the API-provided error text, if any."""

    if not body:
        return None
    error = body.get("error")
    return error if isinstance(error, str) and error.strip() else None


def _records_from_body(body: Mapping[str, Any]) -> tuple[Record, ...]:
    """Parse `{success, data: [...]}` into records."""

    if not body.get("success"):
        return ()
    items = body.get("data")
    if not isinstance(items, list):
        raise RemoteError(LOAD_FAILED_MESSAGE)
    try:
        return tuple(record_from_payload(item) for item in items if isinstance(item, Mapping))
    except ValueError as exc:
        logger.warning("Malformed records payload: %s", exc)
        raise RemoteError(LOAD_FAILED_MESSAGE) from exc


def _created_record(data: object, *, name: str, marks: Marks) -> Record:
    """Build the created Record from the POST `data` field.

    The API may echo the full record, only its id, or nothing; missing fields
    fall back to the submitted values.
    """

    if isinstance(data, Mapping):
        merged = {"name": name, "marks": marks, **data}
        try:
            return record_from_payload(merged)
        except ValueError:
            return Record(id=str(data.get("id") or ""), name=name, marks=marks, created_at=None)
    if isinstance(data, (str, int)) and not isinstance(data, bool):
        return Record(id=str(data), name=name, marks=marks, created_at=None)
    return Record(id="", name=name, marks=marks, created_at=None)
