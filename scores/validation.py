"""Client-side validation for marks submissions."""

from __future__ import annotations

import math
from typing import Final

from .dto import Marks, Submission

MARKS_MIN: Final[int] = 0
MARKS_MAX: Final[int] = 100

REQUIRED_MESSAGE: Final[str] = "Name and marks are required"
RANGE_MESSAGE: Final[str] = f"Marks must be a number between {MARKS_MIN} and {MARKS_MAX}"
NUMBER_MESSAGE: Final[str] = "Marks must be a valid number"


class ValidationError(ValueError):
    """A user-correctable problem with submitted form values."""


def parse_marks(text: str) -> Marks | None:
    """Parse a marks string into a finite number.

    Args:
        text: Raw marks text as entered by the user.

    Returns:
        The parsed value (an `int` when integral), or None when the text is not
        a finite decimal number.
    """

    value = text.strip()
    if not value or "_" in value:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    if parsed.is_integer():
        return int(parsed)
    return parsed


def marks_in_range(marks: Marks) -> bool:
    """Return True when marks fall within the inclusive 0..100 range."""

    return MARKS_MIN <= marks <= MARKS_MAX


def validate_submission(name: str | None, marks_text: str | None, *, enforce_range: bool) -> Submission:
    """Validate raw form values and build a Submission.

    Args:
        name: Candidate name as entered.
        marks_text: Marks as entered.
        enforce_range: When True, marks must lie within 0..100.

    Returns:
        A Submission with the trimmed name and parsed marks.

    Raises:
        ValidationError: When a value is missing, not a number, or out of range.
    """

    cleaned_name = (name or "").strip()
    cleaned_marks = (marks_text or "").strip()
    if not cleaned_name or not cleaned_marks:
        raise ValidationError(REQUIRED_MESSAGE)

    marks = parse_marks(cleaned_marks)
    if enforce_range:
        if marks is None or not marks_in_range(marks):
            raise ValidationError(RANGE_MESSAGE)
    elif marks is None:
        raise ValidationError(NUMBER_MESSAGE)
    return Submission(name=cleaned_name, marks=marks)
