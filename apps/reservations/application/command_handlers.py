"""
Reservation Command Handlers

These are the use cases for the reservation domain.
They orchestrate domain operations within transactions.

Commands:
- CreateReservationCommand: Book a workspace for a time range
- CancelReservationCommand: Cancel a reservation and refund its coupon
- quote_reservation: Price a prospective booking without side effects
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from django.db import DatabaseError  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AlreadyCancelled,
    Forbidden,
    ResourceUnavailable,
    StorageFailure,
)
from shared.domain.value_objects import Money, TimeRange
from apps.users import coupons as coupon_ledger
from apps.reservations.domain.events import ReservationCancelled, ReservationCreated
from apps.reservations.domain.pricing import calculate_price
from apps.reservations.models import Reservation
from apps.reservations.repositories import (
    DjangoReservationRepository,
    DjangoWorkspaceRepository,
    WorkspaceRecord,
)
from apps.reservations.services import ensure_slot_is_free

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateReservationCommand:
    """
    Command to book a workspace

    This is the primary entry point for creating reservations.
    """
    user_id: int
    workspace_id: int
    start_time: datetime
    end_time: datetime
    coupon_code: Optional[str] = None


@dataclass
class CancelReservationCommand:
    """Command to cancel a reservation"""
    reservation_id: int
    requester_id: int
    requester_is_admin: bool = False


@dataclass(frozen=True)
class Quote:
    """Price preview of a prospective reservation"""
    hours: Decimal
    base_price: Money
    discount_percent: int
    discount_amount: Money
    coupon_discount: Money
    final_price: Money


# ===== Command Handlers =====

class CreateReservationHandler:
    """
    Handler for CreateReservation command

    Strategy:
    1. Start database transaction (atomic)
    2. Load the workspace with SELECT FOR UPDATE, serialising bookings
       of this workspace only
    3. Validate availability flag and interval
    4. Reject overlapping blocking reservations
    5. Price the booking with the workspace's discount tiers
    6. Redeem the coupon, if any (compare-and-set on ``used``)
    7. Insert the reservation as confirmed
    8. Commit; ReservationCreated is published after commit and
       triggers the loyalty check outside the request
    """

    def __init__(self, reservation_repo=None, workspace_repo=None):
        self.reservation_repo = reservation_repo or DjangoReservationRepository()
        self.workspace_repo = workspace_repo or DjangoWorkspaceRepository()

    def handle(self, command: CreateReservationCommand) -> Reservation:
        """
        Handle reservation creation

        Returns: Created Reservation

        Raises:
            ResourceNotFound, ResourceUnavailable, InvalidInterval,
            SlotConflict, CouponInvalid, StorageFailure
        """
        logger.info(
            f"Creating reservation for workspace {command.workspace_id}, "
            f"user {command.user_id}, {command.start_time} - {command.end_time}"
        )

        try:
            with DjangoUnitOfWork() as uow:
                workspace = self.workspace_repo.get(command.workspace_id, lock=True)
                if not workspace.available:
                    raise ResourceUnavailable()

                time_range = TimeRange(command.start_time, command.end_time)
                ensure_slot_is_free(workspace.id, time_range)

                breakdown = calculate_price(workspace.price_per_hour, time_range, workspace.discounts)
                final_price = breakdown.price_after_tier

                coupon_code = None
                if command.coupon_code:
                    coupon = coupon_ledger.find_redeemable(
                        coupon_ledger.coupons_for_user(command.user_id, command.coupon_code),
                        command.coupon_code,
                    )
                    final_price = coupon_ledger.redeem(coupon, breakdown.price_after_tier)
                    coupon_code = coupon.code

                reservation = self.reservation_repo.create(
                    user_id=command.user_id,
                    workspace_id=workspace.id,
                    time_range=time_range,
                    total_price=final_price,
                    discount_applied=breakdown.tier_percent,
                    coupon_code=coupon_code,
                )

                uow.add_event(ReservationCreated(
                    aggregate_id=reservation.pk,
                    reservation_id=reservation.pk,
                    user_id=command.user_id,
                    workspace_id=workspace.id,
                    start_time=time_range.start,
                    end_time=time_range.end,
                    total_price=reservation.total_price,
                    coupon_code=coupon_code,
                ))
                # Transaction commits here automatically (__exit__)
        except DatabaseError as exc:
            logger.error(f"Storage failure while booking workspace {command.workspace_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc

        logger.info(
            f"Reservation {reservation.pk} created: workspace {workspace.id}, "
            f"total {reservation.total_price}, tier {breakdown.tier_percent}%, coupon {coupon_code or '-'}"
        )
        return reservation


class CancelReservationHandler:
    """
    Handler for cancelling a reservation

    The coupon refund and the status change are written in one transaction,
    and the reservation row is locked first, so a repeated cancel sees the
    cancelled status and never refunds twice.
    """

    def __init__(self, reservation_repo=None):
        self.reservation_repo = reservation_repo or DjangoReservationRepository()

    def handle(self, command: CancelReservationCommand) -> Reservation:
        logger.info(f"Cancelling reservation {command.reservation_id} by user {command.requester_id}")

        try:
            with DjangoUnitOfWork() as uow:
                reservation = self.reservation_repo.get(command.reservation_id, lock=True)

                if reservation.user_id != command.requester_id and not command.requester_is_admin:
                    raise Forbidden()
                if reservation.status == Reservation.Status.CANCELLED:
                    raise AlreadyCancelled()

                refunded = self._refund_coupon(reservation)

                reservation.mark_cancelled()
                self.reservation_repo.save(reservation)

                uow.add_event(ReservationCancelled(
                    aggregate_id=reservation.pk,
                    reservation_id=reservation.pk,
                    user_id=reservation.user_id,
                    cancelled_by=command.requester_id,
                    refunded_coupon=refunded,
                ))
        except DatabaseError as exc:
            logger.error(f"Storage failure while cancelling reservation {command.reservation_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc

        logger.info(f"Reservation {reservation.pk} cancelled")
        return reservation

    def _refund_coupon(self, reservation: Reservation) -> Optional[str]:
        """Give the owner's coupon back. Returns the refunded code, if any."""
        if not reservation.coupon_code:
            return None

        coupon = coupon_ledger.coupons_for_user(reservation.user_id, reservation.coupon_code).first()
        if coupon is None or not coupon_ledger.refund(coupon):
            logger.warning(
                f"Coupon {reservation.coupon_code} of reservation {reservation.pk} "
                f"was not refunded: missing or not marked used"
            )
            return None
        return coupon.code


# ===== Queries =====

def quote_reservation(
    command: CreateReservationCommand,
    workspace_repo: Optional[DjangoWorkspaceRepository] = None,
) -> Quote:
    """
    Price a booking the way CreateReservationHandler would, without writing

    The coupon is validated but not consumed; the slot is not checked.
    """
    workspace_repo = workspace_repo or DjangoWorkspaceRepository()
    workspace: WorkspaceRecord = workspace_repo.get(command.workspace_id)
    if not workspace.available:
        raise ResourceUnavailable()

    time_range = TimeRange(command.start_time, command.end_time)
    breakdown = calculate_price(workspace.price_per_hour, time_range, workspace.discounts)

    coupon_discount = Money.zero()
    final_price = breakdown.price_after_tier
    if command.coupon_code:
        coupon = coupon_ledger.find_redeemable(
            coupon_ledger.coupons_for_user(command.user_id, command.coupon_code),
            command.coupon_code,
        )
        coupon_discount, final_price = coupon_ledger.apply_coupon(coupon, breakdown.price_after_tier)

    return Quote(
        hours=breakdown.hours,
        base_price=breakdown.base_price,
        discount_percent=breakdown.tier_percent,
        discount_amount=breakdown.discount_amount,
        coupon_discount=coupon_discount,
        final_price=final_price,
    )
