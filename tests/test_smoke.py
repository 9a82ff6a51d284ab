"""Minimal smoke tests for project scaffolding."""

from __future__ import annotations

import pytest


@pytest.mark.unit
def test_pure_packages_import() -> None:
    """Import the Django-free packages and verify their public entry points exist."""

    from scores import validate_submission
    from stores import build_store

    assert callable(validate_submission)
    assert callable(build_store)


@pytest.mark.integration
def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "marksDashboard.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
    assert "students.apps.StudentsConfig" in settings.INSTALLED_APPS
