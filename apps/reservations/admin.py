"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "workspace",
        "user",
        "status",
        "start_time",
        "end_time",
        "total_price",
        "discount_applied",
        "coupon_code",
        "created_at",
    )
    list_filter = ("status", "start_time", "workspace__coworking")
    search_fields = ("user__email", "workspace__name", "coupon_code")
    readonly_fields = (
        "total_price",
        "discount_applied",
        "coupon_code",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
