"""Domain services for reservation workflows."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from shared.domain.exceptions import SlotConflict
from shared.domain.value_objects import TimeRange

from .domain.availability import BLOCKING_STATUSES, has_conflict

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def overlapping_reservations(workspace_id: int, time_range: TimeRange, *, exclude_reservation_id=None):
    """Blocking reservations of the workspace that overlap the requested range."""

    from .models import Reservation  # Local import to prevent circular dependency

    overlapping_filter = Q(start_time__lt=time_range.end) & Q(end_time__gt=time_range.start)
    qs = Reservation.objects.filter(
        workspace_id=workspace_id,
        status__in=BLOCKING_STATUSES,
    ).filter(overlapping_filter)
    if exclude_reservation_id is not None:
        qs = qs.exclude(pk=exclude_reservation_id)
    return qs


def ensure_slot_is_free(workspace_id: int, time_range: TimeRange, *, exclude_reservation_id=None) -> None:
    """Raise SlotConflict if the workspace is taken for any part of the range.

    Callers serialise bookings of one workspace by locking its row first, so
    the check and the following insert cannot interleave with another booking
    of the same workspace.
    """

    candidates = overlapping_reservations(
        workspace_id,
        time_range,
        exclude_reservation_id=exclude_reservation_id,
    )
    if has_conflict(workspace_id, time_range, candidates):
        logger.info(f"Slot conflict for workspace {workspace_id} at {time_range}")
        raise SlotConflict()
