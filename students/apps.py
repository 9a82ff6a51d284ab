"""Django app configuration for Students."""

from __future__ import annotations

from django.apps import AppConfig


class StudentsConfig(AppConfig):
    """AppConfig for stored marks records."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "students"
