"""DTO types shared by the store adapters and the dashboard.

DTOs are plain data containers. They intentionally avoid any Django/ORM
dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

Marks = int | float


@dataclass(frozen=True, slots=True)
class Record:
    """A stored candidate score.

    Attributes:
        id: Identifier assigned by the backing store.
        name: Candidate name (never empty).
        marks: Submitted score; integral values are carried as `int`.
        created_at: Creation time reported by the store, when known.
    """

    id: str
    name: str
    marks: Marks
    created_at: datetime | None = None

    def chart_point(self) -> "ChartPoint":
        """Return the `{name, marks}` pair rendered by the chart."""

        return ChartPoint(name=self.name, marks=self.marks)


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """One bar of the marks chart."""

    name: str
    marks: Marks

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""

        return {"name": self.name, "marks": self.marks}


@dataclass(frozen=True, slots=True)
class Submission:
    """A validated submission ready to be stored.

    Attributes:
        name: Trimmed candidate name.
        marks: Parsed score.
    """

    name: str
    marks: Marks

    def as_payload(self) -> dict[str, object]:
        """Return the create-request body sent to a store."""

        return {"name": self.name, "marks": self.marks}
