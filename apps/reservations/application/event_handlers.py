"""
Reservation Event Handlers

Subscribers for reservation events on the in-process message bus.
Registered once from ReservationsConfig.ready().
"""

import logging

from shared.application.message_bus import message_bus
from apps.reservations.domain.events import (
    LoyaltyCouponIssued,
    ReservationCancelled,
    ReservationCreated,
)

logger = logging.getLogger(__name__)


def enqueue_loyalty_check(event: ReservationCreated):
    """Run the loyalty issuer in a worker, outside the booking request"""
    from apps.reservations.tasks import issue_loyalty_coupon

    issue_loyalty_coupon.delay(event.user_id)


def log_reservation_cancelled(event: ReservationCancelled):
    logger.info(
        f"Reservation {event.reservation_id} of user {event.user_id} cancelled by {event.cancelled_by}, "
        f"refunded coupon: {event.refunded_coupon or '-'}"
    )


def log_loyalty_coupon_issued(event: LoyaltyCouponIssued):
    logger.info(
        f"Loyalty coupon {event.coupon_code} ({event.discount_percent}%) issued to user {event.user_id}, "
        f"valid until {event.expiry_date.isoformat()}"
    )


def register_event_handlers():
    message_bus.register_event_handler(ReservationCreated, enqueue_loyalty_check)
    message_bus.register_event_handler(ReservationCancelled, log_reservation_cancelled)
    message_bus.register_event_handler(LoyaltyCouponIssued, log_loyalty_coupon_issued)
