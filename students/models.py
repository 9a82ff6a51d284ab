"""Database models for submitted marks records."""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from scores.dto import Record
from scores.records import coerce_marks
from scores.validation import MARKS_MAX, MARKS_MIN


class StudentRecord(models.Model):
    """One candidate score submitted through the API.

    Rows are append-only from the application's point of view; removal only
    happens through the admin.
    """

    name = models.CharField(max_length=200)
    marks = models.FloatField(
        validators=[MinValueValidator(MARKS_MIN), MaxValueValidator(MARKS_MAX)],
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Student Record"
        verbose_name_plural = "Student Records"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(marks__gte=MARKS_MIN) & models.Q(marks__lte=MARKS_MAX),
                name="student_record_marks_range",
            ),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"StudentRecord(id={self.pk}, name={self.name!r}, marks={self.marks})"

    def clean(self) -> None:
        """Reject blank names after trimming."""

        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required."})

    def save(self, *args, **kwargs) -> None:
        """Persist the record after validating it."""

        self.full_clean()
        super().save(*args, **kwargs)

    def to_record(self) -> Record:
        """Return the pure Record DTO for this row."""

        return Record(
            id=str(self.pk),
            name=self.name,
            marks=coerce_marks(self.marks),
            created_at=self.created_at,
        )
