"""
Availability Checker

A workspace is free for a time range unless a blocking reservation of the
same workspace overlaps it. Overlap is strict: a reservation ending exactly
when the requested one starts is not a conflict.
"""

from typing import Iterable, Protocol

from shared.domain.value_objects import TimeRange

# Pending reservations hold the slot as well, so a future approval flow
# cannot confirm two overlapping bookings.
BLOCKING_STATUSES = ('pending', 'confirmed')


class ReservationLike(Protocol):
    workspace_id: int
    start_time: object
    end_time: object
    status: str


def blocks(reservation: ReservationLike, workspace_id: int, time_range: TimeRange) -> bool:
    return (
        reservation.workspace_id == workspace_id
        and reservation.status in BLOCKING_STATUSES
        and reservation.start_time < time_range.end
        and reservation.end_time > time_range.start
    )


def has_conflict(
    workspace_id: int,
    time_range: TimeRange,
    reservations: Iterable[ReservationLike],
) -> bool:
    """True if any blocking reservation of ``workspace_id`` overlaps ``time_range``"""
    return any(blocks(reservation, workspace_id, time_range) for reservation in reservations)
