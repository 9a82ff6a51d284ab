"""Chart.js payloads for the marks bar chart."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final, TypedDict

from scores.dto import ChartPoint

BAR_COLOR: Final[str] = "#8884d8"
MAX_CHART_LABELS: Final[int] = 400


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload for the dashboard."""

    label: str
    data: list[float | int]
    backgroundColor: str
    borderColor: str
    borderWidth: int


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets) for the chart panel."""

    labels: list[str]
    datasets: list[ChartDataset]


class ChartOptions(TypedDict):
    """Axis options mirrored into the Chart.js config by the page script."""

    xLabelRotation: int
    yBeginAtZero: bool


@dataclass(frozen=True, slots=True)
class RenderedChart:
    """A rendered marks chart.

    Attributes:
        data: Chart.js labels + datasets.
        options: Display options for the axes.
        empty: True when there are no records to draw.
        error: User-visible reason the chart could not be drawn.
    """

    data: ChartData
    options: ChartOptions
    empty: bool
    error: str | None = None

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable payload for the page script."""

        return {
            "data": self.data,
            "options": self.options,
            "empty": self.empty,
            "error": self.error,
        }


def render_marks_chart(points: Iterable[ChartPoint]) -> RenderedChart:
    """Render one bar per record: candidate name on x, marks on y.

    Args:
        points: `{name, marks}` pairs in display order.

    Returns:
        RenderedChart with a single "Marks" dataset.
    """

    items = list(points)
    options: ChartOptions = {"xLabelRotation": -45, "yBeginAtZero": True}
    if len(items) > MAX_CHART_LABELS:
        return RenderedChart(
            data={"labels": [], "datasets": []},
            options=options,
            empty=True,
            error=f"Too many records to render safely (>{MAX_CHART_LABELS}).",
        )

    dataset: ChartDataset = {
        "label": "Marks",
        "data": [point.marks for point in items],
        "backgroundColor": BAR_COLOR,
        "borderColor": BAR_COLOR,
        "borderWidth": 1,
    }
    return RenderedChart(
        data={"labels": [point.name for point in items], "datasets": [dataset]},
        options=options,
        empty=not items,
    )
