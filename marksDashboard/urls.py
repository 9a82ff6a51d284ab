"""URL configuration for the marks dashboard."""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("", include("core.urls")),
    path("api/", include("students.urls")),
    path("admin/", admin.site.urls),
]
