"""
Reservation Repositories

Persistence collaborators of the booking engine. Workspaces are handed to
the domain as ``WorkspaceRecord`` DTOs with the discount tiers already
resolved, so the domain never sees a Django model of another app.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import logging

from django.db.models import Sum  # type: ignore

from shared.domain.exceptions import ReservationNotFound, ResourceNotFound
from shared.domain.value_objects import Money, TimeRange
from apps.reservations.domain.pricing import DEFAULT_DISCOUNT_TIERS, DiscountTiers
from apps.reservations.models import Reservation
from apps.reservations.services import _lock_queryset_if_possible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceRecord:
    id: int
    name: str
    price_per_hour: Money
    available: bool
    discounts: DiscountTiers


class DjangoWorkspaceRepository:
    """Reads workspaces from the catalogue app"""

    def get(self, workspace_id: int, lock: bool = False) -> WorkspaceRecord:
        """
        Load a workspace

        With ``lock=True`` the row stays locked (SELECT FOR UPDATE) until the
        surrounding transaction ends. Bookings of the same workspace queue on
        this lock; other workspaces are unaffected.
        """
        from apps.workspaces.models import Workspace

        qs = Workspace.objects.filter(pk=workspace_id)
        if lock:
            qs = _lock_queryset_if_possible(qs)
        workspace = qs.first()
        if workspace is None:
            raise ResourceNotFound()
        return self._to_record(workspace)

    @staticmethod
    def _to_record(workspace) -> WorkspaceRecord:
        return WorkspaceRecord(
            id=workspace.pk,
            name=workspace.name,
            price_per_hour=Money(workspace.price_per_hour),
            available=workspace.available,
            discounts=DEFAULT_DISCOUNT_TIERS.with_overrides(
                day=workspace.discount_day,
                month=workspace.discount_month,
                year=workspace.discount_year,
            ),
        )


class DjangoReservationRepository:
    """Reservation persistence"""

    def create(
        self,
        *,
        user_id: int,
        workspace_id: int,
        time_range: TimeRange,
        total_price: Money,
        discount_applied: int,
        coupon_code: Optional[str] = None,
        status: str = Reservation.Status.CONFIRMED,
    ) -> Reservation:
        return Reservation.objects.create(
            user_id=user_id,
            workspace_id=workspace_id,
            start_time=time_range.start,
            end_time=time_range.end,
            total_price=total_price.rounded(),
            discount_applied=discount_applied,
            coupon_code=coupon_code,
            status=status,
        )

    def get(self, reservation_id: int, lock: bool = False) -> Reservation:
        qs = Reservation.objects.filter(pk=reservation_id)
        if lock:
            qs = _lock_queryset_if_possible(qs)
        reservation = qs.first()
        if reservation is None:
            raise ReservationNotFound()
        return reservation

    def save(self, reservation: Reservation) -> None:
        reservation.save(update_fields=['status', 'cancelled_at', 'updated_at'])

    def confirmed_total_for_user(self, user_id: int) -> Decimal:
        total = Reservation.objects.filter(
            user_id=user_id,
            status=Reservation.Status.CONFIRMED,
        ).aggregate(total=Sum('total_price'))['total']
        return total or Decimal('0')
