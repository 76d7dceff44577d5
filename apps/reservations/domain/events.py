"""
Reservation Domain Events

Published by the unit of work after the booking transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class ReservationCreated(DomainEvent):
    """
    Event: A reservation was booked and confirmed

    Triggers:
    - Loyalty coupon check for the user (Celery task)
    """
    reservation_id: int
    user_id: int
    workspace_id: int
    start_time: datetime
    end_time: datetime
    total_price: Decimal
    coupon_code: Optional[str] = None


@dataclass
class ReservationCancelled(DomainEvent):
    """Event: A reservation was cancelled and its slot released"""
    reservation_id: int
    user_id: int
    cancelled_by: int
    refunded_coupon: Optional[str] = None


@dataclass
class LoyaltyCouponIssued(DomainEvent):
    """Event: A user's confirmed spend earned a loyalty coupon"""
    user_id: int
    coupon_code: str
    discount_percent: int
    expiry_date: datetime
    total_spent: Decimal
