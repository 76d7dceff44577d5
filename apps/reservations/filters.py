"""FilterSet definitions for reservation listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Reservation


class ReservationFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Reservation.Status.choices)
    workspace = django_filters.NumberFilter(field_name="workspace_id", lookup_expr="exact")
    start_from = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="gte")
    start_to = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="lt")

    class Meta:
        model = Reservation
        fields = ["status", "workspace"]
