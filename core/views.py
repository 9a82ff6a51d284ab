"""Views for the marks dashboard: submission form, chart, chart data."""

from __future__ import annotations

from typing import Any

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from core.charting.render import render_marks_chart
from core.composition import Dashboard, get_dashboard
from core.feeds import FeedState
from core.forms import RecordSubmissionForm
from core.services import store_submission, top_performers

TOP_PERFORMERS_LIMIT = 5


def _chart_payload(board: Dashboard, state: FeedState) -> dict[str, Any]:
    """Build the JSON payload polled by the page script."""

    return {
        "strategy": state.strategy,
        "loading": state.loading,
        "error": state.error,
        "refresh_signal": board.refresh_signal,
        "poll_interval_seconds": board.poll_interval_seconds,
        "points": [point.as_json() for point in state.chart_points()],
        "chart": render_marks_chart(state.chart_points()).as_json(),
    }


def _wants_json(request: HttpRequest) -> bool:
    """Return True for `fetch()` callers asking for JSON."""

    return "application/json" in request.headers.get("Accept", "")


def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the submission form next to the marks chart.

    A successful POST stores the record, bumps the refresh signal (which
    re-reads the chart feed) and redirects, so the form comes back empty.
    """

    board = get_dashboard()
    board.open_feed(remount=request.method == "GET")

    if request.method == "POST":
        form = RecordSubmissionForm(request.POST, enforce_range=board.enforce_marks_range)
        if form.is_valid():
            outcome = store_submission(board.store, form.cleaned_data["submission"])
            if outcome.ok:
                board.record_created()
                messages.success(request, outcome.message or "")
                return redirect("core:dashboard")
            form.add_error(None, outcome.error)
    else:
        form = RecordSubmissionForm(enforce_range=board.enforce_marks_range)

    state = board.feed.state()
    performers, performers_error = top_performers(board.store, limit=TOP_PERFORMERS_LIMIT)
    return render(
        request,
        "core/dashboard.html",
        {
            "form": form,
            "feed": state,
            "chart": render_marks_chart(state.chart_points()),
            "chart_payload": _chart_payload(board, state),
            "poll_interval_seconds": board.poll_interval_seconds,
            "top_performers": performers,
            "top_performers_error": performers_error,
        },
    )


@require_GET
def chart_data(request: HttpRequest) -> JsonResponse:
    """Return the current chart feed state as JSON."""

    board = get_dashboard()
    board.open_feed(remount=False)
    return JsonResponse(_chart_payload(board, board.feed.state()))


@require_POST
def refresh_chart(request: HttpRequest) -> HttpResponse:
    """Trigger a one-shot chart read (manual "Refresh Data")."""

    board = get_dashboard()
    board.open_feed(remount=False)
    board.feed.refresh()
    state = board.feed.state()
    if _wants_json(request):
        return JsonResponse(_chart_payload(board, state))
    if state.error:
        messages.error(request, state.error)
    return redirect("core:dashboard")
