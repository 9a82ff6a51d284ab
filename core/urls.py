"""URL configuration for the dashboard views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("chart/data/", views.chart_data, name="chart_data"),
    path("chart/refresh/", views.refresh_chart, name="refresh_chart"),
]
