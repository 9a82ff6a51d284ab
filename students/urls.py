"""URL configuration for the students JSON API."""

from __future__ import annotations

from django.urls import path

from students import api

app_name = "students"

urlpatterns = [
    path("students", api.students_collection, name="students"),
    path("top-performers", api.top_performers, name="top_performers"),
]
