"""ASGI entry point for the marks dashboard (uvicorn, daphne)."""

from __future__ import annotations

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "marksDashboard.settings")

application = get_asgi_application()
