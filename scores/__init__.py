"""Pure domain package for the marks dashboard.

This package holds the record DTOs, submission validation and wire-payload
parsing. It must not import Django or perform any I/O so it can be shared by
the store adapters, the REST backend and the dashboard views.
"""

from .dto import ChartPoint, Record, Submission
from .validation import ValidationError, validate_submission

__all__ = ["ChartPoint", "Record", "Submission", "ValidationError", "validate_submission"]
