"""Availability checker over in-memory reservations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from apps.reservations.domain.availability import has_conflict
from shared.domain.value_objects import TimeRange

NINE = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


def at(hours: int) -> datetime:
    return NINE + timedelta(hours=hours)


def existing(start, end, status="confirmed", workspace_id=1):
    return SimpleNamespace(workspace_id=workspace_id, start_time=start, end_time=end, status=status)


def test_overlap_is_a_conflict():
    reservations = [existing(at(0), at(3))]

    assert has_conflict(1, TimeRange(at(2), at(4)), reservations)


def test_enclosing_interval_is_a_conflict():
    reservations = [existing(at(1), at(2))]

    assert has_conflict(1, TimeRange(at(0), at(3)), reservations)


def test_touching_endpoints_do_not_conflict():
    reservations = [existing(at(0), at(3)), existing(at(5), at(6))]

    assert not has_conflict(1, TimeRange(at(3), at(5)), reservations)


def test_cancelled_reservations_never_block():
    reservations = [existing(at(0), at(3), status="cancelled")]

    assert not has_conflict(1, TimeRange(at(1), at(2)), reservations)


def test_pending_reservations_block():
    reservations = [existing(at(0), at(3), status="pending")]

    assert has_conflict(1, TimeRange(at(1), at(2)), reservations)


def test_other_workspaces_do_not_block():
    reservations = [existing(at(0), at(3), workspace_id=2)]

    assert not has_conflict(1, TimeRange(at(1), at(2)), reservations)
