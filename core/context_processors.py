"""Template context processors for the marks dashboard."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest

_BACKEND_LABELS = {
    "rest": "REST API",
    "firestore": "Firestore",
}


def store_backend(request: HttpRequest) -> dict[str, str]:
    """Expose the configured store backend to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `store_backend` and a display label.
    """

    backend = settings.DASHBOARD_STORE_BACKEND
    return {
        "store_backend": backend,
        "store_backend_label": _BACKEND_LABELS.get(backend, backend),
    }
