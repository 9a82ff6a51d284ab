"""Admin registrations for Students models."""

from __future__ import annotations

from django.contrib import admin

from students.models import StudentRecord


@admin.register(StudentRecord)
class StudentRecordAdmin(admin.ModelAdmin):
    """Admin configuration for StudentRecord (out-of-band cleanup)."""

    list_display = ("id", "name", "marks", "created_at")
    search_fields = ("name",)
    ordering = ("-created_at",)
    readonly_fields = ("created_at",)
