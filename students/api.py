"""JSON API for marks records.

Endpoints (mounted under `/api/`):
- `GET students`: all records, newest first.
- `POST students`: create a record from `{"name", "marks"}`.
- `GET top-performers?limit=N`: highest marks first.

Every response body carries `success`; failures add an `error` message that
the REST store adapter shows to the user as-is.
"""

from __future__ import annotations

import json
import logging
from typing import Final

from django.core.exceptions import ValidationError as ModelValidationError
from django.db import DatabaseError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from scores.records import record_to_payload
from scores.validation import REQUIRED_MESSAGE, ValidationError, validate_submission
from students.models import StudentRecord

logger = logging.getLogger(__name__)

STORED_MESSAGE: Final[str] = "Data stored successfully"
DEFAULT_TOP_LIMIT: Final[int] = 5
MAX_TOP_LIMIT: Final[int] = 100


def _failure(error: str, *, status: int) -> JsonResponse:
    """Return a `{"success": false, "error": ...}` response."""

    return JsonResponse({"success": False, "error": error}, status=status)


@csrf_exempt
def students_collection(request: HttpRequest) -> JsonResponse:
    """List records (GET) or create one (POST)."""

    if request.method == "GET":
        records = [row.to_record() for row in StudentRecord.objects.all()]
        return JsonResponse({"success": True, "data": [record_to_payload(r) for r in records]})
    if request.method != "POST":
        return _failure("Method not allowed", status=405)

    try:
        payload = json.loads(request.body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return _failure("Request body must be JSON", status=400)
    if not isinstance(payload, dict):
        return _failure("Request body must be a JSON object", status=400)

    name = payload.get("name")
    marks = payload.get("marks")
    if not isinstance(name, str) or marks is None or isinstance(marks, (bool, list, dict)):
        return _failure(REQUIRED_MESSAGE, status=400)
    try:
        submission = validate_submission(name, str(marks), enforce_range=True)
    except ValidationError as exc:
        return _failure(str(exc), status=400)

    try:
        row = StudentRecord.objects.create(name=submission.name, marks=submission.marks)
    except ModelValidationError as exc:
        return _failure(" ".join(exc.messages), status=400)
    except DatabaseError:
        logger.exception("Could not store record for %r", submission.name)
        return _failure("Failed to store data", status=500)

    logger.info("Stored record id=%s name=%r marks=%s", row.pk, row.name, submission.marks)
    return JsonResponse(
        {"success": True, "data": record_to_payload(row.to_record()), "message": STORED_MESSAGE},
        status=201,
    )


def top_performers(request: HttpRequest) -> JsonResponse:
    """Return the highest-scoring records, `limit` clamped to 1..100."""

    if request.method != "GET":
        return _failure("Method not allowed", status=405)

    raw_limit = (request.GET.get("limit") or "").strip()
    try:
        limit = int(raw_limit) if raw_limit else DEFAULT_TOP_LIMIT
    except ValueError:
        return _failure("limit must be an integer", status=400)
    limit = max(1, min(limit, MAX_TOP_LIMIT))

    rows = StudentRecord.objects.order_by("-marks", "created_at", "id")[:limit]
    return JsonResponse({"success": True, "data": [record_to_payload(row.to_record()) for row in rows]})
