"""WSGI entry point for the marks dashboard (gunicorn, mod_wsgi)."""

from __future__ import annotations

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "marksDashboard.settings")

application = get_wsgi_application()
