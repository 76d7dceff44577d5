"""Admin registration for the workspace catalogue."""

from __future__ import annotations

from django.contrib import admin

from .models import Coworking, Workspace


class WorkspaceInline(admin.TabularInline):
    model = Workspace
    extra = 0
    fields = ("name", "type", "price_per_hour", "capacity", "available")


@admin.register(Coworking)
class CoworkingAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "max_capacity", "opens_at", "closes_at", "created_at")
    search_fields = ("name", "address")
    inlines = [WorkspaceInline]


@admin.register(Workspace)
class WorkspaceAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "coworking",
        "type",
        "price_per_hour",
        "available",
        "discount_day",
        "discount_month",
        "discount_year",
    )
    list_filter = ("type", "available", "coworking")
    search_fields = ("name", "coworking__name")
    readonly_fields = ("created_at", "updated_at")
